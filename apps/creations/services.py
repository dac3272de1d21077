"""
Creation draft/publish conversion.

Besides scalars and blocks, a creation carries features and screenshots
(rebuilt from the draft on every publish, keys deep-copied) and its
technology and video links (mirrored as-is).
"""

from __future__ import annotations

import logging

from apps.content.services import DraftPublishConverter
from apps.core.utils.logging import log_event
from apps.creations.models import (
    Creation,
    CreationDraft,
    Feature,
    FeatureDraft,
    Screenshot,
    ScreenshotDraft,
)

logger = logging.getLogger(__name__)


class CreationConverter(DraftPublishConverter):
    draft_model = CreationDraft
    published_model = Creation
    back_reference = "original_creation"
    scalar_fields = (
        "name",
        "slug",
        "type",
        "logo_id",
        "cover_image_id",
        "started_at",
        "ended_at",
        "external_url",
        "source_code_url",
        "featured",
    )
    label = "creation"

    def validate_draft(self, draft: CreationDraft) -> None:
        errors = {}
        if not draft.name:
            errors["name"] = "A name is required."
        if not draft.slug:
            errors["slug"] = "A slug is required."
        else:
            errors.update(self.validate_unique_slug(draft))
        if not draft.short_description_translation_key_id:
            errors["short_description_translation_key"] = "A short description is required."
        if draft.started_at is None:
            errors["started_at"] = "A start date is required."
        elif draft.ended_at is not None and draft.ended_at < draft.started_at:
            errors["ended_at"] = "The end date cannot precede the start date."
        self.raise_if(errors)

    # ------------------------------------------------------------------
    # Features, screenshots, links
    # ------------------------------------------------------------------
    def copy_related_to_draft(self, published: Creation, draft: CreationDraft) -> None:
        owner = {"creation_draft": draft}
        self._copy_children(published.features.all(), FeatureDraft, owner, self.draft_suffix)
        self._copy_children(published.screenshots.all(), ScreenshotDraft, owner, self.draft_suffix)
        self._mirror_links(published, draft)

    def sync_related_to_published(self, draft: CreationDraft, published: Creation) -> None:
        superseded = self._owned_key_ids(published)
        published.features.all().delete()
        published.screenshots.all().delete()

        owner = {"creation": published}
        self._copy_children(draft.features.all(), Feature, owner, self.copy_suffix)
        self._copy_children(draft.screenshots.all(), Screenshot, owner, self.copy_suffix)
        self._mirror_links(draft, published)

        for key_id in superseded:
            self.store.release(key_id)
        log_event(
            logger, "info", "creation.children.synced",
            creation_id=published.pk,
            features=published.features.count(),
            screenshots=published.screenshots.count(),
        )

    def delete_related(self, parent) -> None:
        key_ids = self._owned_key_ids(parent)
        parent.features.all().delete()
        parent.screenshots.all().delete()
        for key_id in key_ids:
            self.store.release(key_id)

    def _copy_children(self, rows, model, owner, suffix: str) -> None:
        copies = []
        for row in rows:
            values = {name: getattr(row, name) for name in row.scalar_fields}
            for name in row.translated_fields:
                values[f"{name}_id"] = self.copier.copy_key(getattr(row, f"{name}_id"), suffix)
            copies.append(model(**owner, **values))
        model.objects.bulk_create(copies)

    def _owned_key_ids(self, parent):
        ids = []
        for row in [*parent.features.all(), *parent.screenshots.all()]:
            ids.extend(row.owned_key_ids())
        return ids

    @staticmethod
    def _mirror_links(source, target) -> None:
        target.technologies.set(source.technologies.all())
        target.videos.set(source.videos.all())
