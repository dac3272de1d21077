from __future__ import annotations

import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.test import TestCase

from apps.core.utils import feature_flags
from apps.site_settings.models import PublishingSettings


class PublishingFlagTests(TestCase):
    def setUp(self) -> None:
        feature_flags.reset_cache()

    def tearDown(self) -> None:
        feature_flags.reset_cache()

    def test_empty_publish_is_off_by_default(self):
        self.assertFalse(feature_flags.allow_empty_publish())

    def test_saving_settings_refreshes_cached_flag(self):
        self.assertFalse(feature_flags.allow_empty_publish())
        ps = PublishingSettings.get_solo()
        ps.allow_empty_publish = True
        ps.save()
        self.assertTrue(feature_flags.allow_empty_publish())
