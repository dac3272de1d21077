from __future__ import annotations

from typing import List

from django.db import models

from apps.content.models import ContentBlock, ContentParent
from apps.core.models import TimestampedModel


class CreationType(models.TextChoices):
    PORTFOLIO = "portfolio", "Portfolio"
    GAME = "game", "Game"
    LIBRARY = "library", "Library"
    WEBSITE = "website", "Website"
    TOOL = "tool", "Tool"
    MAP = "map", "Map"
    OTHER = "other", "Other"


class TechnologyType(models.TextChoices):
    FRAMEWORK = "framework", "Framework"
    LIBRARY = "library", "Library"
    LANGUAGE = "language", "Language"
    OTHER = "other", "Other"


class Technology(models.Model):
    name = models.CharField(max_length=100, unique=True)
    type = models.CharField(max_length=20, choices=TechnologyType.choices, default=TechnologyType.OTHER)
    svg_icon = models.TextField(blank=True, default="")
    description_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="technology_descriptions",
    )

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Technologies"

    def __str__(self) -> str:
        return self.name


class CreationBase(ContentParent):
    translated_fields = ("short_description_translation_key", "full_description_translation_key")

    name = models.CharField(max_length=255, blank=True, default="")
    type = models.CharField(max_length=20, choices=CreationType.choices, default=CreationType.OTHER)
    logo = models.ForeignKey(
        "media.Picture", null=True, blank=True, on_delete=models.SET_NULL, related_name="%(class)s_logos"
    )
    cover_image = models.ForeignKey(
        "media.Picture", null=True, blank=True, on_delete=models.SET_NULL, related_name="%(class)s_covers"
    )
    ended_at = models.DateField(null=True, blank=True)
    external_url = models.URLField(max_length=500, blank=True, default="")
    source_code_url = models.URLField(max_length=500, blank=True, default="")
    featured = models.BooleanField(default=False)
    full_description_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="%(class)s_full_descriptions",
    )
    technologies = models.ManyToManyField(Technology, blank=True, related_name="%(class)ss")
    videos = models.ManyToManyField("media.Video", blank=True, related_name="%(class)ss")

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return self.name or f"{self._meta.verbose_name} #{self.pk}"


class Creation(CreationBase):
    slug = models.SlugField(max_length=255, unique=True)
    started_at = models.DateField()
    short_description_translation_key = models.ForeignKey(
        "translations.TranslationKey", on_delete=models.PROTECT, related_name="creation_short_descriptions"
    )

    class Meta:
        ordering = ["-featured", "-started_at"]


class CreationDraft(CreationBase):
    is_draft = True

    slug = models.SlugField(max_length=255, blank=True, default="")
    started_at = models.DateField(null=True, blank=True)
    short_description_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="creation_draft_short_descriptions",
    )
    original_creation = models.ForeignKey(
        Creation, null=True, blank=True, on_delete=models.SET_NULL, related_name="drafts"
    )

    class Meta:
        ordering = ["-updated_at"]


class CreationContent(ContentBlock):
    parent = models.ForeignKey(Creation, on_delete=models.CASCADE, related_name="contents")

    class Meta(ContentBlock.Meta):
        indexes = [models.Index(fields=["parent", "order"], name="creation_content_order_idx")]


class CreationDraftContent(ContentBlock):
    parent = models.ForeignKey(CreationDraft, on_delete=models.CASCADE, related_name="contents")

    class Meta(ContentBlock.Meta):
        indexes = [models.Index(fields=["parent", "order"], name="creation_draft_order_idx")]


# =====================================================================
# Features and screenshots (rebuilt on every publish)
# =====================================================================
class CreationChild(TimestampedModel):
    """Row owned by a creation or draft whose translation keys it owns too."""

    scalar_fields: tuple = ()
    translated_fields: tuple = ()

    class Meta:
        abstract = True

    def owned_key_ids(self) -> List[int]:
        ids = (getattr(self, f"{name}_id") for name in self.translated_fields)
        return [key_id for key_id in ids if key_id]


class FeatureBase(CreationChild):
    scalar_fields = ("picture_id",)
    translated_fields = ("title_translation_key", "description_translation_key")

    title_translation_key = models.ForeignKey(
        "translations.TranslationKey", on_delete=models.PROTECT, related_name="%(class)s_titles"
    )
    description_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="%(class)s_descriptions",
    )
    picture = models.ForeignKey(
        "media.Picture", null=True, blank=True, on_delete=models.SET_NULL, related_name="%(class)s_set"
    )

    class Meta:
        abstract = True
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self._meta.verbose_name} #{self.pk}"


class Feature(FeatureBase):
    creation = models.ForeignKey(Creation, on_delete=models.CASCADE, related_name="features")


class FeatureDraft(FeatureBase):
    creation_draft = models.ForeignKey(CreationDraft, on_delete=models.CASCADE, related_name="features")


class ScreenshotBase(CreationChild):
    scalar_fields = ("picture_id", "order")
    translated_fields = ("caption_translation_key",)

    picture = models.ForeignKey("media.Picture", on_delete=models.PROTECT, related_name="%(class)s_set")
    caption_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="%(class)s_captions",
    )
    order = models.PositiveIntegerField(default=1)

    class Meta:
        abstract = True
        ordering = ["order", "pk"]

    def __str__(self) -> str:
        return f"{self.picture} @ {self.order}"


class Screenshot(ScreenshotBase):
    creation = models.ForeignKey(Creation, on_delete=models.CASCADE, related_name="screenshots")


class ScreenshotDraft(ScreenshotBase):
    creation_draft = models.ForeignKey(CreationDraft, on_delete=models.CASCADE, related_name="screenshots")
