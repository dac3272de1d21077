"""
Existence checks the content pipeline runs before it links media.

Pictures and videos are owned by the media library; content only ever
references them and never deletes them.
"""

from __future__ import annotations

from typing import Iterable, List

from apps.media.models import Picture, Video


class PictureRepository:
    def exists(self, picture_id: int) -> bool:
        return Picture.objects.filter(pk=picture_id).exists()

    def missing(self, picture_ids: Iterable[int]) -> List[int]:
        """Ids from ``picture_ids`` with no matching row, in input order."""
        wanted = list(picture_ids)
        found = set(Picture.objects.filter(pk__in=wanted).values_list("pk", flat=True))
        return [pid for pid in wanted if pid not in found]


class VideoRepository:
    def exists(self, video_id: int) -> bool:
        return Video.objects.filter(pk=video_id).exists()
