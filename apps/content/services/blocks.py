"""
apps.content.services.blocks
============================

Parent-agnostic CRUD, ordering and duplication of content blocks.

Every operation takes the concrete parent (or block) and goes through
``parent.contents``, so the same code serves blog post drafts, blog
posts, creation drafts and creations.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from django.conf import settings
from django.db.models import Max

from apps.content.models import (
    ContentGallery,
    ContentMarkdown,
    ContentVideo,
    GalleryLayout,
    GalleryPicture,
)
from apps.content.services.copier import ContentCopier
from apps.core.exceptions import NotFound, ValidationFailure
from apps.core.transactions import transactional
from apps.core.utils.logging import log_event
from apps.media.repositories import PictureRepository, VideoRepository
from apps.translations.services import TranslationKeyStore

logger = logging.getLogger(__name__)


class ContentBlockService:
    def __init__(
        self,
        store: Optional[TranslationKeyStore] = None,
        pictures: Optional[PictureRepository] = None,
        videos: Optional[VideoRepository] = None,
        copier: Optional[ContentCopier] = None,
    ):
        self.store = store or TranslationKeyStore()
        self.pictures = pictures or PictureRepository()
        self.videos = videos or VideoRepository()
        self.copier = copier or ContentCopier(self.store)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_markdown_content(self, parent, translation_key_id: int, order: Optional[int] = None):
        self._require_parent(parent)
        self._require_key(translation_key_id)
        with transactional("content.create_markdown"):
            entity = ContentMarkdown.objects.create(translation_key_id=translation_key_id)
            return self._attach(parent, entity, order)

    def create_gallery_content(
        self, parent, gallery_data: Mapping[str, Any], order: Optional[int] = None
    ):
        """
        ``gallery_data`` holds ``layout``, optional ``columns`` and an
        optional ordered ``pictures`` id list. An optional ``captions``
        list, aligned with ``pictures``, creates one caption key per
        non-empty entry.
        """
        self._require_parent(parent)
        layout, columns = self._gallery_settings(gallery_data)
        picture_ids = self._picture_ids(gallery_data.get("pictures") or [])
        captions = self._captions(gallery_data.get("captions"), picture_ids)
        with transactional("content.create_gallery"):
            entity = ContentGallery.objects.create(layout=layout, columns=columns)
            self._attach_pictures(entity, picture_ids, captions)
            return self._attach(parent, entity, order)

    def create_video_content(
        self,
        parent,
        video_id: int,
        order: Optional[int] = None,
        caption_translation_key_id: Optional[int] = None,
    ):
        self._require_parent(parent)
        self._require_video(video_id)
        if caption_translation_key_id is not None:
            self._require_key(caption_translation_key_id)
        with transactional("content.create_video"):
            entity = ContentVideo.objects.create(
                video_id=video_id, caption_translation_key_id=caption_translation_key_id
            )
            return self._attach(parent, entity, order)

    # ------------------------------------------------------------------
    # Updates (repoint only, old keys are left to the caller)
    # ------------------------------------------------------------------
    def update_markdown_content(self, markdown: ContentMarkdown, translation_key_id: int) -> ContentMarkdown:
        self._require_entity(markdown)
        self._require_key(translation_key_id)
        markdown.translation_key_id = translation_key_id
        markdown.save(update_fields=["translation_key", "updated_at"])
        markdown.refresh_from_db()
        return markdown

    def update_gallery_content(
        self, gallery: ContentGallery, gallery_data: Mapping[str, Any]
    ) -> ContentGallery:
        """
        Layout and columns are always rewritten. The picture set is fully
        replaced only when ``pictures`` is present, even if empty.
        """
        self._require_entity(gallery)
        layout, columns = self._gallery_settings(gallery_data)
        replace = "pictures" in gallery_data
        if replace:
            picture_ids = self._picture_ids(gallery_data["pictures"] or [])
            captions = self._captions(gallery_data.get("captions"), picture_ids)
        with transactional("content.update_gallery"):
            gallery.layout = layout
            gallery.columns = columns
            gallery.save(update_fields=["layout", "columns", "updated_at"])
            if replace:
                old_keys = gallery.owned_key_ids()
                gallery.gallery_pictures.all().delete()
                for key_id in old_keys:
                    self.store.release(key_id)
                self._attach_pictures(gallery, picture_ids, captions)
        gallery.refresh_from_db()
        log_event(logger, "info", "content.gallery.updated", gallery_id=gallery.pk, replaced=replace)
        return gallery

    def update_video_content(
        self,
        video_content: ContentVideo,
        video_id: int,
        caption_translation_key_id: Optional[int] = None,
    ) -> ContentVideo:
        self._require_entity(video_content)
        self._require_video(video_id)
        if caption_translation_key_id is not None:
            self._require_key(caption_translation_key_id)
        video_content.video_id = video_id
        video_content.caption_translation_key_id = caption_translation_key_id
        video_content.save(update_fields=["video", "caption_translation_key", "updated_at"])
        video_content.refresh_from_db()
        return video_content

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    def reorder_content(self, parent, ordered_block_ids: Sequence[int]) -> None:
        """
        Assign ``order = index + 1`` to the listed blocks of ``parent``.
        Unlisted blocks keep their order. Listed blocks are first parked
        above the current maximum so no two rows ever share a value.
        """
        ids = list(ordered_block_ids)
        if not ids:
            return
        if len(set(ids)) != len(ids):
            raise ValidationFailure({"ordered_block_ids": "Block ids must not repeat."})
        self._require_parent(parent)

        owned = set(parent.contents.filter(pk__in=ids).values_list("pk", flat=True))
        strangers = [pk for pk in ids if pk not in owned]
        if strangers:
            existing = set(parent.block_model.objects.filter(pk__in=strangers).values_list("pk", flat=True))
            missing = [pk for pk in strangers if pk not in existing]
            if missing:
                raise NotFound("content block", missing[0])
            raise ValidationFailure(
                {"ordered_block_ids": f"Blocks {strangers} do not belong to this parent."}
            )

        with transactional("content.reorder"):
            staging = self._max_order(parent) + 1
            for offset, pk in enumerate(ids):
                parent.contents.filter(pk=pk).update(order=staging + offset)
            for index, pk in enumerate(ids):
                parent.contents.filter(pk=pk).update(order=index + 1)
        log_event(logger, "info", "content.block.reordered", parent=str(parent), count=len(ids))

    def move_to(self, parent, block_id: int, position: int) -> None:
        """Renumber ``parent`` to 1..N with ``block_id`` at ``position`` (clamped)."""
        ids = list(parent.ordered_contents().values_list("pk", flat=True))
        if block_id not in ids:
            self.get_block(parent, block_id)
        ids.remove(block_id)
        position = min(max(position, 1), len(ids) + 1)
        ids.insert(position - 1, block_id)
        self.reorder_content(parent, ids)

    def move_up(self, parent, block_id: int) -> None:
        ids = list(parent.ordered_contents().values_list("pk", flat=True))
        if block_id not in ids:
            self.get_block(parent, block_id)
        index = ids.index(block_id)
        if index > 0:
            self.move_to(parent, block_id, index)

    def move_down(self, parent, block_id: int) -> None:
        ids = list(parent.ordered_contents().values_list("pk", flat=True))
        if block_id not in ids:
            self.get_block(parent, block_id)
        index = ids.index(block_id)
        if index < len(ids) - 1:
            self.move_to(parent, block_id, index + 2)

    # ------------------------------------------------------------------
    # Delete / duplicate
    # ------------------------------------------------------------------
    def delete_content(self, block) -> bool:
        block_id = block.pk
        if block_id is None or not type(block).objects.filter(pk=block_id).exists():
            raise NotFound("content block", block_id)
        with transactional("content.delete"):
            self.copier.retire([block])
        log_event(
            logger, "info", "content.block.deleted",
            block_id=block_id, content_type=block.content_type, content_id=block.content_id,
        )
        return True

    def duplicate_content(self, block):
        """
        Clone the block's entity into a new row appended to the same
        parent. Translation keys are shared with the original.
        """
        parent = block.parent
        with transactional("content.duplicate"):
            copy = self.copier.copy_block(
                block, parent, key_suffix=None, order=self._max_order(parent) + 1
            )
        log_event(logger, "info", "content.block.duplicated", source_id=block.pk, copy_id=copy.pk)
        return copy

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def validate_content_structure(self, parent) -> bool:
        return parent.contents.exists()

    def has_content(self, parent) -> bool:
        return self.validate_content_structure(parent)

    def content_count(self, parent) -> int:
        return parent.contents.count()

    def get_block(self, parent, block_id: int):
        try:
            return parent.contents.get(pk=block_id)
        except parent.block_model.DoesNotExist:
            raise NotFound("content block", block_id) from None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _max_order(self, parent) -> int:
        return parent.contents.aggregate(top=Max("order"))["top"] or 0

    def _attach(self, parent, entity, order: Optional[int]):
        if order is None:
            order = self._max_order(parent) + 1
        elif order < 1:
            raise ValidationFailure({"order": "Order is 1-based."})
        block = parent.contents.create(content_type=entity.kind, content_id=entity.pk, order=order)
        block._content_cache = entity
        log_event(
            logger, "info", "content.block.created",
            parent=str(parent), content_type=entity.kind, content_id=entity.pk, order=order,
        )
        return block

    def _attach_pictures(
        self, gallery: ContentGallery, picture_ids: List[int], captions: List[Optional[str]]
    ) -> None:
        locale = settings.CONTENT_LOCALES[0]
        slots = []
        for index, picture_id in enumerate(picture_ids):
            caption_key_id = None
            if captions[index]:
                caption_key = self.store.create(f"gallery.caption.{gallery.pk}.{index + 1}")
                self.store.set_text(caption_key.pk, locale, captions[index])
                caption_key_id = caption_key.pk
            slots.append(
                GalleryPicture(
                    gallery=gallery,
                    picture_id=picture_id,
                    order=index + 1,
                    caption_translation_key_id=caption_key_id,
                )
            )
        GalleryPicture.objects.bulk_create(slots)

    def _gallery_settings(self, gallery_data: Mapping[str, Any]):
        layout = gallery_data.get("layout")
        if layout not in GalleryLayout.values:
            raise ValidationFailure({"layout": f"Unknown gallery layout {layout!r}."})
        columns = gallery_data.get("columns")
        if columns is not None and (not isinstance(columns, int) or columns < 1):
            raise ValidationFailure({"columns": "Columns must be a positive integer."})
        return layout, columns

    def _picture_ids(self, raw: Iterable[Any]) -> List[int]:
        ids = list(raw)
        if any(isinstance(pid, bool) or not isinstance(pid, int) for pid in ids):
            raise ValidationFailure({"pictures": "Pictures must be a list of ids."})
        missing = self.pictures.missing(ids)
        if missing:
            raise NotFound("picture", missing[0])
        return ids

    def _captions(self, raw: Optional[Sequence[Optional[str]]], picture_ids: List[int]):
        captions = list(raw or [])
        if len(captions) > len(picture_ids):
            raise ValidationFailure({"captions": "More captions than pictures."})
        return captions + [None] * (len(picture_ids) - len(captions))

    def _require_parent(self, parent) -> None:
        if parent.pk is None or not type(parent).objects.filter(pk=parent.pk).exists():
            raise NotFound(parent._meta.verbose_name, parent.pk)

    def _require_entity(self, entity) -> None:
        if entity.pk is None or not type(entity).objects.filter(pk=entity.pk).exists():
            raise NotFound(entity.kind, entity.pk)

    def _require_key(self, key_id: int) -> None:
        if not self.store.exists(key_id):
            raise NotFound("translation key", key_id)

    def _require_video(self, video_id: int) -> None:
        if not self.videos.exists(video_id):
            raise NotFound("video", video_id)
