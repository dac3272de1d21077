"""
Folio Test Settings
===================
Fast, isolated settings for the test suite: in-memory SQLite, models
created straight from their definitions.
"""

from __future__ import annotations

from .settings import *  # noqa: F403, F401

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}


class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()

CONTENT_LOCALES = ["en", "fr"]
CONTENT_COPY_KEY_SUFFIX = "copy"
CONTENT_DRAFT_KEY_SUFFIX = "draft"

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

LOGGING["root"]["level"] = "WARNING"
LOGGING["loggers"]["apps"]["level"] = "WARNING"
