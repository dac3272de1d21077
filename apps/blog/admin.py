from django.contrib import admin

from apps.content.admin import ContentBlockInline, ContentParentAdmin

from .models import (
    BlogCategory,
    BlogPost,
    BlogPostContent,
    BlogPostDraft,
    BlogPostDraftContent,
    GameReview,
    GameReviewDraft,
    GameReviewDraftLink,
    GameReviewLink,
)
from .services import BlogPostConverter


class BlogPostContentInline(ContentBlockInline):
    model = BlogPostContent


class BlogPostDraftContentInline(ContentBlockInline):
    model = BlogPostDraftContent


class GameReviewLinkInline(admin.TabularInline):
    model = GameReviewLink
    extra = 0


class GameReviewDraftLinkInline(admin.TabularInline):
    model = GameReviewDraftLink
    extra = 0


@admin.register(BlogCategory)
class BlogCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "color", "order")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}


@admin.register(BlogPost)
class BlogPostAdmin(ContentParentAdmin):
    converter = BlogPostConverter()
    list_display = ("slug", "type", "category", "created_at")
    list_filter = ("type", "category")
    search_fields = ("slug",)
    raw_id_fields = ("title_translation_key", "cover_picture")
    inlines = [BlogPostContentInline]


@admin.register(BlogPostDraft)
class BlogPostDraftAdmin(ContentParentAdmin):
    converter = BlogPostConverter()
    list_display = ("slug", "type", "category", "original_blog_post", "updated_at")
    list_filter = ("type", "category")
    search_fields = ("slug",)
    raw_id_fields = ("title_translation_key", "cover_picture", "original_blog_post")
    inlines = [BlogPostDraftContentInline]


@admin.register(GameReview)
class GameReviewAdmin(admin.ModelAdmin):
    list_display = ("game_title", "blog_post", "rating")
    search_fields = ("game_title", "developer", "publisher")
    inlines = [GameReviewLinkInline]


@admin.register(GameReviewDraft)
class GameReviewDraftAdmin(admin.ModelAdmin):
    list_display = ("game_title", "blog_post_draft", "rating")
    search_fields = ("game_title", "developer", "publisher")
    inlines = [GameReviewDraftLinkInline]
