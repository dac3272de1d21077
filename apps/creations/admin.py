from django.contrib import admin

from apps.content.admin import ContentBlockInline, ContentParentAdmin

from .models import (
    Creation,
    CreationContent,
    CreationDraft,
    CreationDraftContent,
    Feature,
    FeatureDraft,
    Screenshot,
    ScreenshotDraft,
    Technology,
)
from .services import CreationConverter


class CreationContentInline(ContentBlockInline):
    model = CreationContent


class CreationDraftContentInline(ContentBlockInline):
    model = CreationDraftContent


class FeatureInline(admin.TabularInline):
    model = Feature
    extra = 0
    raw_id_fields = ("title_translation_key", "description_translation_key", "picture")


class FeatureDraftInline(FeatureInline):
    model = FeatureDraft


class ScreenshotInline(admin.TabularInline):
    model = Screenshot
    extra = 0
    ordering = ("order",)
    raw_id_fields = ("picture", "caption_translation_key")


class ScreenshotDraftInline(ScreenshotInline):
    model = ScreenshotDraft


@admin.register(Technology)
class TechnologyAdmin(admin.ModelAdmin):
    list_display = ("name", "type")
    list_filter = ("type",)
    search_fields = ("name",)
    raw_id_fields = ("description_translation_key",)


@admin.register(Creation)
class CreationAdmin(ContentParentAdmin):
    converter = CreationConverter()
    list_display = ("name", "slug", "type", "featured", "started_at")
    list_filter = ("type", "featured")
    search_fields = ("name", "slug")
    raw_id_fields = ("logo", "cover_image", "short_description_translation_key", "full_description_translation_key")
    filter_horizontal = ("technologies", "videos")
    inlines = [FeatureInline, ScreenshotInline, CreationContentInline]


@admin.register(CreationDraft)
class CreationDraftAdmin(ContentParentAdmin):
    converter = CreationConverter()
    list_display = ("name", "slug", "type", "original_creation", "updated_at")
    list_filter = ("type",)
    search_fields = ("name", "slug")
    raw_id_fields = (
        "logo",
        "cover_image",
        "short_description_translation_key",
        "full_description_translation_key",
        "original_creation",
    )
    filter_horizontal = ("technologies", "videos")
    inlines = [FeatureDraftInline, ScreenshotDraftInline, CreationDraftContentInline]
