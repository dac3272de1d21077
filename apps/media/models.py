from __future__ import annotations

from django.db import models

from apps.core.models import TimestampedModel


class Picture(TimestampedModel):
    filename = models.CharField(max_length=255)
    path_original = models.CharField(max_length=500, blank=True, default="")
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.filename


class VideoStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    TRANSCODING = "transcoding", "Transcoding"
    READY = "ready", "Ready"
    ERROR = "error", "Error"


class Video(TimestampedModel):
    name = models.CharField(max_length=255)
    provider_video_id = models.CharField(max_length=120, blank=True, default="")
    status = models.CharField(
        max_length=20, choices=VideoStatus.choices, default=VideoStatus.PENDING
    )
    cover_picture = models.ForeignKey(
        Picture, null=True, blank=True, on_delete=models.SET_NULL, related_name="video_covers"
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name
