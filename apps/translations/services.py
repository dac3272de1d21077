"""
Translation key store used by the content pipeline.

The pipeline only ever talks to keys by id. Texts are copied per locale
when a key is duplicated, and a key is released (deleted with its texts)
once nothing in the database points at it any more.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, Optional

from django.conf import settings

from apps.core.exceptions import NotFound, ValidationFailure
from apps.core.transactions import transactional
from apps.core.utils.logging import log_event
from apps.translations.models import Translation, TranslationKey

logger = logging.getLogger(__name__)


class TranslationKeyStore:
    def get(self, key_id: int) -> TranslationKey:
        try:
            return TranslationKey.objects.get(pk=key_id)
        except TranslationKey.DoesNotExist:
            raise NotFound("translation key", key_id) from None

    def exists(self, key_id: Optional[int]) -> bool:
        if key_id is None:
            return False
        return TranslationKey.objects.filter(pk=key_id).exists()

    def create(self, key: Optional[str] = None) -> TranslationKey:
        base = key or f"content.{uuid.uuid4().hex}"
        return TranslationKey.objects.create(key=self._unique_key(base))

    def set_text(self, key_id: int, locale: str, text: str) -> Translation:
        if locale not in settings.CONTENT_LOCALES:
            raise ValidationFailure({"locale": f"Unsupported locale '{locale}'."})
        translation, _ = Translation.objects.update_or_create(
            translation_key=self.get(key_id),
            locale=locale,
            defaults={"text": text},
        )
        return translation

    def get_text(self, key_id: int, locale: str) -> Optional[str]:
        return (
            Translation.objects.filter(translation_key_id=key_id, locale=locale)
            .values_list("text", flat=True)
            .first()
        )

    def all_translations(self, key_id: int) -> Dict[str, str]:
        return dict(
            Translation.objects.filter(translation_key_id=key_id).values_list("locale", "text")
        )

    def duplicate(self, key_id: int, suffix: str) -> TranslationKey:
        """
        Copy a key and every one of its locale texts under ``<key>_<suffix>``.
        Collisions get a numeric tail, the same way slugs do.
        """
        source = self.get(key_id)
        with transactional("translation.duplicate"):
            copy = TranslationKey.objects.create(
                key=self._unique_key(f"{source.key}_{suffix}")
            )
            Translation.objects.bulk_create(
                Translation(translation_key=copy, locale=t.locale, text=t.text)
                for t in source.translations.all()
            )
        log_event(logger, "debug", "translation.key.duplicated", source=source.key, copy=copy.key)
        return copy

    def delete(self, key_id: Optional[int]) -> None:
        if key_id is None:
            return
        deleted, _ = TranslationKey.objects.filter(pk=key_id).delete()
        if deleted:
            log_event(logger, "debug", "translation.key.deleted", key_id=key_id)

    def is_referenced(self, key_id: int) -> bool:
        """True while any row outside this app still points at the key."""
        for rel in TranslationKey._meta.related_objects:
            if rel.related_model is Translation:
                continue
            manager = rel.related_model._base_manager
            if manager.filter(**{rel.field.name: key_id}).exists():
                return True
        return False

    def release(self, key_id: Optional[int]) -> bool:
        """Delete the key unless another row still references it."""
        if key_id is None or self.is_referenced(key_id):
            return False
        self.delete(key_id)
        return True

    def _unique_key(self, base: str) -> str:
        base = base[:240]
        candidate = base
        idx = 1
        while TranslationKey.objects.filter(key=candidate).exists():
            candidate = f"{base}_{idx}"
            idx += 1
        return candidate
