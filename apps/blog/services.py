"""
Blog post draft/publish conversion.

Adds to the generic converter: pre-publish validation (slug, title,
category, ready videos) and the game review sub-entity, which follows
the same create-or-update-in-place rule as the post itself.
"""

from __future__ import annotations

import logging
from typing import Optional

from apps.blog.models import (
    BlogPost,
    BlogPostDraft,
    BlogPostType,
    GameReview,
    GameReviewDraft,
    GameReviewDraftLink,
    GameReviewLink,
)
from apps.content.services import DraftPublishConverter
from apps.core.utils.logging import log_event

logger = logging.getLogger(__name__)


class BlogPostConverter(DraftPublishConverter):
    draft_model = BlogPostDraft
    published_model = BlogPost
    back_reference = "original_blog_post"
    scalar_fields = ("slug", "type", "category_id", "cover_picture_id")
    label = "blog"

    def validate_draft(self, draft: BlogPostDraft) -> None:
        errors = {}
        if not draft.slug:
            errors["slug"] = "A slug is required."
        else:
            errors.update(self.validate_unique_slug(draft))
        if not draft.title_translation_key_id:
            errors["title_translation_key"] = "A title is required."
        if not draft.category_id:
            errors["category"] = "A category is required."
        errors.update(self.validate_videos(draft))
        self.raise_if(errors)

    # ------------------------------------------------------------------
    # Game review
    # ------------------------------------------------------------------
    def copy_related_to_draft(self, published: BlogPost, draft: BlogPostDraft) -> None:
        review = GameReview.objects.filter(blog_post=published).first()
        if review is None:
            return
        review_draft = GameReviewDraft(blog_post_draft=draft)
        self._copy_review(review, review_draft, self.draft_suffix)
        review_draft.save()
        self._copy_links(review, review_draft, GameReviewDraftLink, "game_review_draft", self.draft_suffix)

    def sync_related_to_published(self, draft: BlogPostDraft, published: BlogPost) -> None:
        review_draft = self._review_draft_for(draft)
        review = GameReview.objects.filter(blog_post=published).first()

        if review_draft is None:
            if review is not None:
                self._delete_review(review)
            return

        superseded = review.owned_key_ids() if review is not None else []
        if review is None:
            review = GameReview(blog_post=published)
        self._copy_review(review_draft, review, self.copy_suffix)
        review.save()
        review.links.all().delete()
        self._copy_links(review_draft, review, GameReviewLink, "game_review", self.copy_suffix)
        for key_id in superseded:
            self.store.release(key_id)
        log_event(logger, "info", "blog.game_review.synced", blog_post_id=published.pk, game_review_id=review.pk)

    def delete_related(self, parent) -> None:
        if isinstance(parent, BlogPost):
            review = GameReview.objects.filter(blog_post=parent).first()
        else:
            review = GameReviewDraft.objects.filter(blog_post_draft=parent).first()
        if review is not None:
            self._delete_review(review)

    def _review_draft_for(self, draft: BlogPostDraft) -> Optional[GameReviewDraft]:
        if draft.type != BlogPostType.GAME_REVIEW:
            return None
        return GameReviewDraft.objects.filter(blog_post_draft=draft).first()

    def _copy_review(self, source, target, suffix: str) -> None:
        for name in source.scalar_fields:
            setattr(target, name, getattr(source, name))
        for name in source.translated_fields:
            setattr(target, f"{name}_id", self.copier.copy_key(getattr(source, f"{name}_id"), suffix))

    def _copy_links(self, source, target, link_model, owner_field: str, suffix: str) -> None:
        link_model.objects.bulk_create(
            link_model(
                **{owner_field: target},
                type=link.type,
                url=link.url,
                label_translation_key_id=self.copier.copy_key(link.label_translation_key_id, suffix),
                order=link.order,
            )
            for link in source.links.all()
        )

    def _delete_review(self, review) -> None:
        key_ids = review.owned_key_ids()
        review.delete()
        for key_id in key_ids:
            self.store.release(key_id)
