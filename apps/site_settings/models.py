"""
Runtime publishing policy (singleton).

Editable from the admin without a deploy; read through
``apps.core.utils.feature_flags`` which caches the row per process.
"""

from __future__ import annotations

from django.db import models
from solo.models import SingletonModel


class PublishingSettings(SingletonModel):
    allow_empty_publish = models.BooleanField(
        default=False,
        help_text="Allow publishing drafts that have no content blocks.",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Publishing Settings"

    def __str__(self) -> str:
        return "Publishing Settings"
