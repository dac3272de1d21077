from __future__ import annotations

from typing import List

from django.core.validators import MaxValueValidator
from django.db import models
from django.utils.text import slugify

from apps.content.models import ContentBlock, ContentParent
from apps.core.models import TimestampedModel


class BlogPostType(models.TextChoices):
    ARTICLE = "article", "Article"
    GAME_REVIEW = "game_review", "Game review"


class CategoryColor(models.TextChoices):
    RED = "red", "Red"
    BLUE = "blue", "Blue"
    GREEN = "green", "Green"
    YELLOW = "yellow", "Yellow"
    PURPLE = "purple", "Purple"
    GRAY = "gray", "Gray"


class BlogCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    color = models.CharField(max_length=20, choices=CategoryColor.choices, default=CategoryColor.GRAY)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["order", "name"]
        verbose_name_plural = "Blog categories"

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:120]
        super().save(*args, **kwargs)


# =====================================================================
# Posts and drafts
# =====================================================================
class BlogPostBase(ContentParent):
    translated_fields = ("title_translation_key",)

    type = models.CharField(max_length=20, choices=BlogPostType.choices, default=BlogPostType.ARTICLE)
    cover_picture = models.ForeignKey(
        "media.Picture", null=True, blank=True, on_delete=models.SET_NULL, related_name="%(class)s_covers"
    )

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return self.slug or f"{self._meta.verbose_name} #{self.pk}"


class BlogPost(BlogPostBase):
    slug = models.SlugField(max_length=255, unique=True)
    title_translation_key = models.ForeignKey(
        "translations.TranslationKey", on_delete=models.PROTECT, related_name="blog_post_titles"
    )
    category = models.ForeignKey(BlogCategory, on_delete=models.PROTECT, related_name="posts")

    class Meta:
        ordering = ["-created_at"]


class BlogPostDraft(BlogPostBase):
    is_draft = True

    slug = models.SlugField(max_length=255, blank=True, default="")
    title_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="blog_post_draft_titles",
    )
    category = models.ForeignKey(
        BlogCategory, null=True, blank=True, on_delete=models.PROTECT, related_name="drafts"
    )
    original_blog_post = models.ForeignKey(
        BlogPost, null=True, blank=True, on_delete=models.SET_NULL, related_name="drafts"
    )

    class Meta:
        ordering = ["-updated_at"]


class BlogPostContent(ContentBlock):
    parent = models.ForeignKey(BlogPost, on_delete=models.CASCADE, related_name="contents")

    class Meta(ContentBlock.Meta):
        indexes = [models.Index(fields=["parent", "order"], name="blog_post_content_order_idx")]


class BlogPostDraftContent(ContentBlock):
    parent = models.ForeignKey(BlogPostDraft, on_delete=models.CASCADE, related_name="contents")

    class Meta(ContentBlock.Meta):
        indexes = [models.Index(fields=["parent", "order"], name="blog_draft_content_order_idx")]


# =====================================================================
# Game reviews (one per game_review post / draft)
# =====================================================================
class GameReviewLinkType(models.TextChoices):
    OFFICIAL = "official", "Official website"
    STEAM = "steam", "Steam"
    EPIC = "epic", "Epic Games Store"
    GOG = "gog", "GOG"
    PLAYSTATION = "playstation", "PlayStation Store"
    XBOX = "xbox", "Xbox Store"
    NINTENDO = "nintendo", "Nintendo eShop"
    OTHER = "other", "Other"


class GameReviewBase(TimestampedModel):
    translated_fields = ("pros_translation_key", "cons_translation_key")
    scalar_fields = (
        "game_title",
        "release_date",
        "genre",
        "developer",
        "publisher",
        "platforms",
        "cover_picture_id",
        "rating",
    )

    game_title = models.CharField(max_length=255)
    release_date = models.DateField(null=True, blank=True)
    genre = models.CharField(max_length=100, blank=True, default="")
    developer = models.CharField(max_length=255, blank=True, default="")
    publisher = models.CharField(max_length=255, blank=True, default="")
    platforms = models.JSONField(default=list, blank=True)
    cover_picture = models.ForeignKey(
        "media.Picture", null=True, blank=True, on_delete=models.SET_NULL, related_name="%(class)s_covers"
    )
    pros_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="%(class)s_pros",
    )
    cons_translation_key = models.ForeignKey(
        "translations.TranslationKey",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="%(class)s_cons",
    )
    rating = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MaxValueValidator(10)])

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return self.game_title

    def owned_key_ids(self) -> List[int]:
        ids = [self.pros_translation_key_id, self.cons_translation_key_id]
        ids += list(self.links.values_list("label_translation_key_id", flat=True))
        return [key_id for key_id in ids if key_id]


class GameReview(GameReviewBase):
    blog_post = models.OneToOneField(BlogPost, on_delete=models.CASCADE, related_name="game_review")


class GameReviewDraft(GameReviewBase):
    blog_post_draft = models.OneToOneField(
        BlogPostDraft, on_delete=models.CASCADE, related_name="game_review_draft"
    )


class GameReviewLinkBase(models.Model):
    type = models.CharField(max_length=20, choices=GameReviewLinkType.choices, default=GameReviewLinkType.OTHER)
    url = models.URLField(max_length=500)
    label_translation_key = models.ForeignKey(
        "translations.TranslationKey", on_delete=models.PROTECT, related_name="%(class)s_labels"
    )
    order = models.PositiveIntegerField(default=1)

    class Meta:
        abstract = True
        ordering = ["order", "pk"]

    def __str__(self) -> str:
        return f"{self.get_type_display()}: {self.url}"


class GameReviewLink(GameReviewLinkBase):
    game_review = models.ForeignKey(GameReview, on_delete=models.CASCADE, related_name="links")


class GameReviewDraftLink(GameReviewLinkBase):
    game_review_draft = models.ForeignKey(GameReviewDraft, on_delete=models.CASCADE, related_name="links")
