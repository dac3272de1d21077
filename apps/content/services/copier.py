"""
Copy and retire content entities.

``clone_entity`` is the single place where the shallow/deep distinction
lives: without a key suffix the clone shares every translation key with
its source, with a suffix each owned key is duplicated (all locales).
``retire`` deletes blocks, their entities and whichever owned keys are
no longer referenced.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from apps.content.models import (
    ContentGallery,
    ContentKind,
    ContentMarkdown,
    ContentVideo,
    GalleryPicture,
)
from apps.core.utils.logging import log_event
from apps.translations.services import TranslationKeyStore

logger = logging.getLogger(__name__)


class ContentCopier:
    def __init__(self, store: Optional[TranslationKeyStore] = None):
        self.store = store or TranslationKeyStore()
        self._cloners = {
            ContentKind.MARKDOWN: self._clone_markdown,
            ContentKind.GALLERY: self._clone_gallery,
            ContentKind.VIDEO: self._clone_video,
        }

    def copy_key(self, key_id: Optional[int], suffix: Optional[str]) -> Optional[int]:
        if key_id is None or suffix is None:
            return key_id
        return self.store.duplicate(key_id, suffix).pk

    def clone_entity(self, entity, key_suffix: Optional[str] = None):
        return self._cloners[entity.kind](entity, key_suffix)

    def copy_block(self, block, target_parent, key_suffix: Optional[str], order: Optional[int] = None):
        """Clone ``block``'s entity and link it to ``target_parent``."""
        entity = self.clone_entity(block.content, key_suffix)
        copy = target_parent.contents.create(
            content_type=block.content_type,
            content_id=entity.pk,
            order=block.order if order is None else order,
        )
        copy._content_cache = entity
        return copy

    def copy_blocks(self, source_parent, target_parent, key_suffix: Optional[str]) -> List:
        copies = [
            self.copy_block(block, target_parent, key_suffix)
            for block in source_parent.ordered_contents()
        ]
        log_event(
            logger, "debug", "content.blocks.copied",
            source=str(source_parent), target=str(target_parent), count=len(copies),
        )
        return copies

    def retire(self, blocks: Iterable) -> int:
        """
        Delete each block, then its entity, then whichever of the entity's
        keys are no longer referenced. Must run inside the caller's
        transaction.
        """
        count = 0
        for block in blocks:
            block.delete()
            self.discard_entity(block)
            count += 1
        return count

    def discard_entity(self, block) -> bool:
        """
        Delete the entity a (deleted) block pointed at and release its keys.
        Already gone is a no-op, so the block ``post_delete`` receivers and
        ``retire`` can both call it.
        """
        entity = block.entity_model.objects.filter(pk=block.content_id).first()
        if entity is None:
            return False
        key_ids = entity.owned_key_ids()
        entity.delete()
        for key_id in key_ids:
            self.store.release(key_id)
        log_event(
            logger, "debug", "content.entity.discarded",
            content_type=block.content_type, content_id=block.content_id, keys=len(key_ids),
        )
        return True

    # ------------------------------------------------------------------
    def _clone_markdown(self, entity: ContentMarkdown, suffix: Optional[str]) -> ContentMarkdown:
        return ContentMarkdown.objects.create(
            translation_key_id=self.copy_key(entity.translation_key_id, suffix)
        )

    def _clone_gallery(self, entity: ContentGallery, suffix: Optional[str]) -> ContentGallery:
        clone = ContentGallery.objects.create(layout=entity.layout, columns=entity.columns)
        GalleryPicture.objects.bulk_create(
            GalleryPicture(
                gallery=clone,
                picture_id=slot.picture_id,
                order=slot.order,
                caption_translation_key_id=self.copy_key(slot.caption_translation_key_id, suffix),
            )
            for slot in entity.slots()
        )
        return clone

    def _clone_video(self, entity: ContentVideo, suffix: Optional[str]) -> ContentVideo:
        return ContentVideo.objects.create(
            video_id=entity.video_id,
            caption_translation_key_id=self.copy_key(entity.caption_translation_key_id, suffix),
        )
