from django.contrib import admin

from .models import ContentGallery, ContentMarkdown, ContentVideo, GalleryPicture


class ContentBlockInline(admin.TabularInline):
    """
    Blocks are listed on their parent but only changed through
    ContentBlockService, which keeps each block paired with its entity.
    """

    extra = 0
    can_delete = False
    ordering = ("order",)
    fields = ("order", "content_type", "content_id")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class ContentEntityAdmin(admin.ModelAdmin):
    """Entities live and die with their block; no standalone add or delete."""

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class ContentParentAdmin(admin.ModelAdmin):
    """
    Deletes go through the aggregate's converter so blocks, entities,
    sub-entities and keys are cleaned up together (drafts first for a
    published parent).
    """

    converter = None

    def delete_model(self, request, obj):
        if obj.is_draft:
            self.converter.delete_draft(obj)
        else:
            self.converter.delete_published(obj)

    def delete_queryset(self, request, queryset):
        for obj in queryset:
            self.delete_model(request, obj)


class GalleryPictureInline(admin.TabularInline):
    model = GalleryPicture
    extra = 0
    can_delete = False
    ordering = ("order",)
    raw_id_fields = ("picture", "caption_translation_key")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ContentMarkdown)
class ContentMarkdownAdmin(ContentEntityAdmin):
    list_display = ("id", "translation_key", "updated_at")
    raw_id_fields = ("translation_key",)


@admin.register(ContentGallery)
class ContentGalleryAdmin(ContentEntityAdmin):
    list_display = ("id", "layout", "columns", "updated_at")
    list_filter = ("layout",)
    inlines = [GalleryPictureInline]


@admin.register(ContentVideo)
class ContentVideoAdmin(ContentEntityAdmin):
    list_display = ("id", "video", "caption_translation_key", "updated_at")
    raw_id_fields = ("video", "caption_translation_key")
