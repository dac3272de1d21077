"""
apps.content.services.conversion
================================

Draft/published promotion for any aggregate built on ``ContentParent``.

Subclasses name the two models, the draft's back-reference field and the
scalar fields to carry across; hooks cover aggregate-specific
sub-entities (e.g. blog game reviews).

Transitions:

- ``create_draft_from_published``: editable deep copy of a published
  parent (returns the existing draft if there is one).
- ``publish_draft``: create or update-in-place the published parent from
  the draft; superseded blocks and keys are retired last, in the same
  transaction.
- ``delete_draft`` / ``delete_published``: remove a parent with its
  blocks, entities and owned keys.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import models

from apps.content.services.blocks import ContentBlockService
from apps.core.exceptions import EmptyContentFailure, NotFound, ValidationFailure
from apps.core.transactions import transactional
from apps.core.utils import feature_flags
from apps.core.utils.logging import log_event
from apps.media.models import VideoStatus

logger = logging.getLogger(__name__)


class DraftPublishConverter:
    draft_model: type[models.Model]
    published_model: type[models.Model]
    back_reference: str = ""
    scalar_fields: tuple = ()
    label: str = "content"

    def __init__(self, blocks: Optional[ContentBlockService] = None):
        self.blocks = blocks or ContentBlockService()
        self.store = self.blocks.store
        self.copier = self.blocks.copier

    @property
    def copy_suffix(self) -> str:
        return settings.CONTENT_COPY_KEY_SUFFIX

    @property
    def draft_suffix(self) -> str:
        return settings.CONTENT_DRAFT_KEY_SUFFIX

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_draft(self, published):
        return (
            self.draft_model.objects.filter(**{self.back_reference: published})
            .order_by("pk")
            .first()
        )

    def published_for(self, draft):
        published_id = getattr(draft, f"{self.back_reference}_id")
        if published_id is None:
            return None
        return self.published_model.objects.filter(pk=published_id).first()

    # ------------------------------------------------------------------
    # Published -> draft
    # ------------------------------------------------------------------
    def create_draft_from_published(self, published):
        self._require(published)
        existing = self.find_draft(published)
        if existing is not None:
            log_event(logger, "info", f"{self.label}.draft.reused", published_id=published.pk, draft_id=existing.pk)
            return existing

        with transactional(f"{self.label}.create_draft"):
            draft = self.draft_model(**self.scalar_values(published))
            setattr(draft, self.back_reference, published)
            self._copy_translated_fields(published, draft, self.draft_suffix)
            draft.save()
            self.copier.copy_blocks(published, draft, self.copy_suffix)
            self.copy_related_to_draft(published, draft)

        log_event(logger, "info", f"{self.label}.draft.created", published_id=published.pk, draft_id=draft.pk)
        return draft

    # ------------------------------------------------------------------
    # Draft -> published
    # ------------------------------------------------------------------
    def publish_draft(self, draft):
        self._require(draft)
        self.validate_draft(draft)
        if not self.blocks.validate_content_structure(draft) and not feature_flags.allow_empty_publish():
            raise EmptyContentFailure(
                {"contents": "A draft needs at least one content block to be published."}
            )

        with transactional(f"{self.label}.publish"):
            published = self.published_for(draft)
            if published is None:
                published = self._create_published(draft)
                created = True
            else:
                published = self._update_published(draft, published.pk)
                created = False

        log_event(
            logger, "info", f"{self.label}.draft.published",
            draft_id=draft.pk, published_id=published.pk, created=created,
        )
        return published

    def _create_published(self, draft):
        published = self.published_model(**self.scalar_values(draft))
        self._copy_translated_fields(draft, published, self.copy_suffix)
        published.save()
        self.copier.copy_blocks(draft, published, self.copy_suffix)
        self.sync_related_to_published(draft, published)

        setattr(draft, self.back_reference, published)
        draft.save(update_fields=[self.back_reference, "updated_at"])
        return published

    def _update_published(self, draft, published_id: int):
        published = self.published_model.objects.select_for_update().get(pk=published_id)
        superseded_blocks = list(published.ordered_contents())
        superseded_keys = published.translated_key_ids()

        for name, value in self.scalar_values(draft).items():
            setattr(published, name, value)
        self._copy_translated_fields(draft, published, self.copy_suffix)
        published.save()
        self.copier.copy_blocks(draft, published, self.copy_suffix)
        self.sync_related_to_published(draft, published)

        # Only once the new content is in place
        self.copier.retire(superseded_blocks)
        for key_id in superseded_keys:
            self.store.release(key_id)
        return published

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------
    def delete_draft(self, draft) -> bool:
        self._require(draft)
        with transactional(f"{self.label}.delete_draft"):
            self._delete_parent(draft)
        log_event(logger, "info", f"{self.label}.draft.deleted", draft_id=draft.pk)
        return True

    def delete_published(self, published) -> bool:
        self._require(published)
        published_id = published.pk
        with transactional(f"{self.label}.delete_published"):
            drafts = self.draft_model.objects.filter(**{self.back_reference: published})
            for draft in list(drafts):
                self._delete_parent(draft)
            self._delete_parent(published)
        log_event(logger, "info", f"{self.label}.published.deleted", published_id=published_id)
        return True

    def _delete_parent(self, parent) -> None:
        for block in list(parent.ordered_contents()):
            self.blocks.delete_content(block)
        key_ids = parent.translated_key_ids()
        self.delete_related(parent)
        parent.delete()
        for key_id in key_ids:
            self.store.release(key_id)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def scalar_values(self, source) -> Dict[str, Any]:
        return {name: getattr(source, name) for name in self.scalar_fields}

    def validate_draft(self, draft) -> None:
        """Raise ValidationFailure when ``draft`` is not ready to go live."""

    def copy_related_to_draft(self, published, draft) -> None:
        pass

    def sync_related_to_published(self, draft, published) -> None:
        pass

    def delete_related(self, parent) -> None:
        pass

    # ------------------------------------------------------------------
    # Shared helpers for subclasses
    # ------------------------------------------------------------------
    def validate_videos(self, draft) -> Dict[str, str]:
        """Videos must be transcoded and carry a cover picture before publication."""
        errors = []
        for block in draft.ordered_contents().filter(content_type="video"):
            video = block.content.video
            if video.cover_picture_id is None:
                errors.append(f"Video '{video.name}' needs a cover picture before publication.")
            if video.status != VideoStatus.READY:
                errors.append(f"Video '{video.name}' must be transcoded before publication (status: {video.status}).")
        return {"videos": " ".join(errors)} if errors else {}

    def validate_unique_slug(self, draft) -> Dict[str, str]:
        clash = self.published_model.objects.filter(slug=draft.slug)
        target_id = getattr(draft, f"{self.back_reference}_id")
        if target_id is not None:
            clash = clash.exclude(pk=target_id)
        return {"slug": f"Slug '{draft.slug}' is already published."} if clash.exists() else {}

    def _copy_translated_fields(self, source, target, suffix: str) -> None:
        for name in source.translated_fields:
            key_id = getattr(source, f"{name}_id")
            setattr(target, f"{name}_id", self.copier.copy_key(key_id, suffix))

    def _require(self, parent) -> None:
        if parent.pk is None or not type(parent).objects.filter(pk=parent.pk).exists():
            raise NotFound(parent._meta.verbose_name, parent.pk)

    @staticmethod
    def raise_if(errors: Dict[str, str]) -> None:
        if errors:
            raise ValidationFailure(errors)
