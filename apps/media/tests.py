from __future__ import annotations

import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.test import TestCase

from apps.media.models import Picture, Video
from apps.media.repositories import PictureRepository, VideoRepository


class MediaRepositoryTests(TestCase):
    def test_picture_existence_and_missing_ids(self):
        picture = Picture.objects.create(filename="a.jpg")
        repo = PictureRepository()
        self.assertTrue(repo.exists(picture.pk))
        self.assertFalse(repo.exists(987654))
        self.assertEqual(repo.missing([987654, picture.pk, 987655]), [987654, 987655])
        self.assertEqual(repo.missing([]), [])

    def test_video_existence(self):
        video = Video.objects.create(name="Trailer")
        self.assertTrue(VideoRepository().exists(video.pk))
        self.assertFalse(VideoRepository().exists(987654))
