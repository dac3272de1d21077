from django.contrib import admin

from .models import Picture, Video


@admin.register(Picture)
class PictureAdmin(admin.ModelAdmin):
    list_display = ("filename", "width", "height", "created_at")
    search_fields = ("filename",)


@admin.register(Video)
class VideoAdmin(admin.ModelAdmin):
    list_display = ("name", "status", "provider_video_id", "created_at")
    list_filter = ("status",)
    search_fields = ("name", "provider_video_id")
