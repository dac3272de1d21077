from __future__ import annotations

from typing import List

from django.db import models

from apps.core.exceptions import NotFound
from apps.core.models import TimestampedModel


class ContentKind(models.TextChoices):
    MARKDOWN = "markdown", "Markdown"
    GALLERY = "gallery", "Gallery"
    VIDEO = "video", "Video"


class GalleryLayout(models.TextChoices):
    GRID = "grid", "Grid"
    MASONRY = "masonry", "Masonry"
    CAROUSEL = "carousel", "Carousel"
    STACK = "stack", "Stack"


# =====================================================================
# Content entities (the payload a block points to)
# =====================================================================
class ContentMarkdown(TimestampedModel):
    kind = ContentKind.MARKDOWN

    translation_key = models.ForeignKey(
        "translations.TranslationKey", on_delete=models.PROTECT, related_name="markdown_contents"
    )

    def __str__(self) -> str:
        return f"Markdown #{self.pk}"

    def owned_key_ids(self) -> List[int]:
        return [self.translation_key_id]


class ContentGallery(TimestampedModel):
    kind = ContentKind.GALLERY

    layout = models.CharField(
        max_length=20, choices=GalleryLayout.choices, default=GalleryLayout.GRID
    )
    columns = models.PositiveSmallIntegerField(null=True, blank=True)
    pictures = models.ManyToManyField(
        "media.Picture", through="GalleryPicture", related_name="galleries", blank=True
    )

    def __str__(self) -> str:
        return f"Gallery #{self.pk} ({self.layout})"

    def slots(self) -> models.QuerySet:
        return self.gallery_pictures.order_by("order", "pk")

    def owned_key_ids(self) -> List[int]:
        return list(
            self.gallery_pictures.exclude(caption_translation_key__isnull=True).values_list(
                "caption_translation_key_id", flat=True
            )
        )


class GalleryPicture(models.Model):
    """Pivot row: one picture in one gallery, with its position and caption."""

    gallery = models.ForeignKey(
        ContentGallery, on_delete=models.CASCADE, related_name="gallery_pictures"
    )
    picture = models.ForeignKey(
        "media.Picture", on_delete=models.PROTECT, related_name="gallery_slots"
    )
    order = models.PositiveIntegerField()
    caption_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="gallery_captions",
    )

    class Meta:
        ordering = ["order", "pk"]

    def __str__(self) -> str:
        return f"{self.gallery} / picture {self.picture_id} @ {self.order}"


class ContentVideo(TimestampedModel):
    kind = ContentKind.VIDEO

    video = models.ForeignKey("media.Video", on_delete=models.PROTECT, related_name="contents")
    caption_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="video_captions",
    )

    def __str__(self) -> str:
        return f"Video content #{self.pk}"

    def owned_key_ids(self) -> List[int]:
        return [self.caption_translation_key_id] if self.caption_translation_key_id else []


ENTITY_MODELS = {
    ContentKind.MARKDOWN: ContentMarkdown,
    ContentKind.GALLERY: ContentGallery,
    ContentKind.VIDEO: ContentVideo,
}


# =====================================================================
# Blocks and their parents
# =====================================================================
class ContentBlock(TimestampedModel):
    """
    Ordered link between a parent container and one content entity.

    Concrete subclasses add a ``parent`` foreign key with
    ``related_name="contents"``; everything else is shared.
    """

    content_type = models.CharField(max_length=20, choices=ContentKind.choices)
    content_id = models.PositiveBigIntegerField()
    order = models.PositiveIntegerField()

    class Meta:
        abstract = True
        ordering = ["order", "pk"]

    def __str__(self) -> str:
        return f"{self.content_type}#{self.content_id} @ {self.order}"

    @property
    def entity_model(self):
        return ENTITY_MODELS[ContentKind(self.content_type)]

    @property
    def content(self):
        """The referenced entity, cached on the instance after first access."""
        cached = getattr(self, "_content_cache", None)
        if cached is None or cached.pk != self.content_id:
            try:
                cached = self.entity_model.objects.get(pk=self.content_id)
            except self.entity_model.DoesNotExist:
                raise NotFound(self.content_type, self.content_id) from None
            self._content_cache = cached
        return cached


class ContentParent(TimestampedModel):
    """
    Aggregate that owns an ordered list of content blocks.

    ``translated_fields`` names the parent's own translation key foreign
    keys; converters deep-copy them alongside the blocks.
    """

    is_draft = False
    translated_fields: tuple = ()

    class Meta:
        abstract = True

    @property
    def block_model(self):
        return self.contents.model

    def ordered_contents(self) -> models.QuerySet:
        return self.contents.order_by("order", "pk")

    def translated_key_ids(self) -> List[int]:
        ids = (getattr(self, f"{name}_id") for name in self.translated_fields)
        return [key_id for key_id in ids if key_id]
