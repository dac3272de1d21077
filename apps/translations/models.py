from __future__ import annotations

from django.db import models

from apps.core.models import TimestampedModel


class TranslationKey(TimestampedModel):
    """
    Opaque handle to a set of localized texts. Content rows point at keys,
    never at texts directly.
    """

    key = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ["key"]

    def __str__(self) -> str:
        return self.key


class Translation(TimestampedModel):
    translation_key = models.ForeignKey(
        TranslationKey, on_delete=models.CASCADE, related_name="translations"
    )
    locale = models.CharField(max_length=10)
    text = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["translation_key", "locale"]
        constraints = [
            models.UniqueConstraint(
                fields=["translation_key", "locale"], name="uniq_translation_key_locale"
            )
        ]

    def __str__(self) -> str:
        return f"{self.translation_key}[{self.locale}]"
