"""
Folio Development Settings
==========================
Overrides `settings.py` for local development.

- DEBUG mode enabled
- Local-only allowed hosts
- Verbose logging for the project apps
"""

from __future__ import annotations

from .settings import *  # import production defaults

DEBUG = True
ENV = "development"

ALLOWED_HOSTS = ["127.0.0.1", "localhost", "0.0.0.0", "testserver"]

LOGGING["root"]["level"] = "DEBUG"
LOGGING["handlers"]["console"]["formatter"] = "verbose"

for logger_name in ("apps.content", "apps.blog", "apps.creations", "apps.translations"):
    LOGGING["loggers"].setdefault(
        logger_name,
        {
            "handlers": ["console"],
            "level": "DEBUG",
            "propagate": False,
        },
    )
