from __future__ import annotations

import datetime
import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from apps.content.models import ContentGallery, ContentMarkdown
from apps.content.services import ContentBlockService
from apps.core.exceptions import EmptyContentFailure, ValidationFailure
from apps.core.utils import feature_flags
from apps.creations.models import (
    Creation,
    CreationDraft,
    CreationType,
    Feature,
    FeatureDraft,
    Screenshot,
    ScreenshotDraft,
    Technology,
)
from apps.creations.services import CreationConverter
from apps.media.models import Picture, Video
from apps.translations.models import TranslationKey
from apps.translations.services import TranslationKeyStore


class CreationFixtures:
    def setUp(self) -> None:
        feature_flags.reset_cache()
        self.store = TranslationKeyStore()
        self.blocks = ContentBlockService(store=self.store)
        self.converter = CreationConverter(blocks=self.blocks)
        self.picture = Picture.objects.create(filename="map.png")
        self.godot = Technology.objects.create(name="Godot")
        self.trailer = Video.objects.create(name="Trailer")

    def tearDown(self) -> None:
        feature_flags.reset_cache()

    def make_key(self, text: str) -> TranslationKey:
        key = self.store.create()
        self.store.set_text(key.pk, "en", text)
        return key

    def make_creation(self) -> Creation:
        creation = Creation.objects.create(
            name="Dungeon Crawler",
            slug="dungeon-crawler",
            type=CreationType.GAME,
            started_at=datetime.date(2023, 1, 1),
            short_description_translation_key=self.make_key("A roguelike"),
            full_description_translation_key=self.make_key("A roguelike with procedural floors"),
            featured=True,
        )
        self.blocks.create_gallery_content(creation, {"layout": "masonry", "columns": 3, "pictures": [self.picture.pk]})
        Feature.objects.create(
            creation=creation,
            title_translation_key=self.make_key("Procedural floors"),
            description_translation_key=self.make_key("Every run is different"),
            picture=self.picture,
        )
        Screenshot.objects.create(
            creation=creation, picture=self.picture, caption_translation_key=self.make_key("Floor one"), order=1
        )
        creation.technologies.add(self.godot)
        creation.videos.add(self.trailer)
        return creation


class CreationConverterTests(CreationFixtures, TestCase):
    def test_round_trip_through_a_draft(self):
        creation = self.make_creation()
        old_gallery = creation.ordered_contents().get().content_id

        draft = self.converter.create_draft_from_published(creation)
        self.assertEqual(draft.original_creation, creation)
        self.assertEqual((draft.name, draft.type, draft.featured), ("Dungeon Crawler", CreationType.GAME, True))
        self.assertNotEqual(
            draft.full_description_translation_key_id, creation.full_description_translation_key_id
        )

        draft.name = "Dungeon Crawler II"
        draft.ended_at = datetime.date(2024, 6, 30)
        draft.save()
        self.blocks.create_markdown_content(draft, self.make_key("Postmortem").pk)

        published = self.converter.publish_draft(draft)

        self.assertEqual(published.pk, creation.pk)
        self.assertEqual(published.name, "Dungeon Crawler II")
        self.assertEqual(published.ended_at, datetime.date(2024, 6, 30))
        self.assertEqual([b.order for b in published.ordered_contents()], [1, 2])
        self.assertFalse(ContentGallery.objects.filter(pk=old_gallery).exists())
        gallery = published.ordered_contents().first().content
        self.assertEqual((gallery.layout, gallery.columns), ("masonry", 3))
        self.assertEqual(list(gallery.slots().values_list("picture_id", flat=True)), [self.picture.pk])

    def test_new_draft_publishes_a_creation(self):
        draft = CreationDraft.objects.create(
            name="Tile editor",
            slug="tile-editor",
            type=CreationType.TOOL,
            started_at=datetime.date(2022, 3, 1),
            short_description_translation_key=self.make_key("Level editing"),
        )
        self.blocks.create_markdown_content(draft, self.make_key("Usage").pk)

        creation = self.converter.publish_draft(draft)

        draft.refresh_from_db()
        self.assertEqual(draft.original_creation, creation)
        self.assertIsNone(creation.full_description_translation_key_id)
        self.assertEqual(self.store.get_text(creation.short_description_translation_key_id, "en"), "Level editing")

    def test_missing_fields_are_reported(self):
        draft = CreationDraft.objects.create()
        self.blocks.create_markdown_content(draft, self.make_key("Body").pk)
        with self.assertRaises(ValidationFailure) as ctx:
            self.converter.publish_draft(draft)
        self.assertEqual(
            set(ctx.exception.message_dict),
            {"name", "slug", "short_description_translation_key", "started_at"},
        )

    def test_end_date_before_start_date(self):
        draft = CreationDraft.objects.create(
            name="Backwards",
            slug="backwards",
            started_at=datetime.date(2024, 1, 1),
            ended_at=datetime.date(2023, 1, 1),
            short_description_translation_key=self.make_key("Oops"),
        )
        self.blocks.create_markdown_content(draft, self.make_key("Body").pk)
        with self.assertRaises(ValidationFailure) as ctx:
            self.converter.publish_draft(draft)
        self.assertEqual(list(ctx.exception.message_dict), ["ended_at"])

    def test_empty_draft_is_refused(self):
        draft = CreationDraft.objects.create(
            name="Empty",
            slug="empty",
            started_at=datetime.date(2024, 1, 1),
            short_description_translation_key=self.make_key("Nothing yet"),
        )
        with self.assertRaises(EmptyContentFailure):
            self.converter.publish_draft(draft)
        self.assertFalse(Creation.objects.exists())

    def test_delete_published_cleans_everything(self):
        creation = self.make_creation()
        self.converter.create_draft_from_published(creation)

        self.converter.delete_published(creation)

        self.assertFalse(Creation.objects.exists())
        self.assertFalse(CreationDraft.objects.exists())
        self.assertFalse(ContentGallery.objects.exists())
        self.assertFalse(TranslationKey.objects.exists())
        self.assertTrue(Picture.objects.filter(pk=self.picture.pk).exists())


class CreationChildrenTests(CreationFixtures, TestCase):
    def test_draft_gets_its_own_features_and_screenshots(self):
        creation = self.make_creation()
        draft = self.converter.create_draft_from_published(creation)

        feature, source_feature = draft.features.get(), creation.features.get()
        self.assertEqual(feature.picture_id, self.picture.pk)
        self.assertNotEqual(feature.title_translation_key_id, source_feature.title_translation_key_id)
        self.assertEqual(self.store.get_text(feature.title_translation_key_id, "en"), "Procedural floors")
        self.assertTrue(feature.title_translation_key.key.endswith("_draft"))

        screenshot = draft.screenshots.get()
        self.assertEqual((screenshot.picture_id, screenshot.order), (self.picture.pk, 1))
        self.assertEqual(self.store.get_text(screenshot.caption_translation_key_id, "en"), "Floor one")
        self.assertEqual(list(draft.technologies.all()), [self.godot])
        self.assertEqual(list(draft.videos.all()), [self.trailer])

    def test_publish_rebuilds_children_from_the_draft(self):
        creation = self.make_creation()
        old_keys = creation.features.get().owned_key_ids() + creation.screenshots.get().owned_key_ids()
        draft = self.converter.create_draft_from_published(creation)
        draft_feature = draft.features.get()
        self.store.set_text(draft_feature.title_translation_key_id, "en", "Hand-made floors")
        second = Picture.objects.create(filename="boss.png")
        ScreenshotDraft.objects.create(creation_draft=draft, picture=second, order=2)
        draft.technologies.clear()

        published = self.converter.publish_draft(draft)

        feature = published.features.get()
        self.assertNotEqual(feature.title_translation_key_id, draft_feature.title_translation_key_id)
        self.assertEqual(self.store.get_text(feature.title_translation_key_id, "en"), "Hand-made floors")
        self.assertEqual(
            list(published.screenshots.values_list("picture_id", "order")),
            [(self.picture.pk, 1), (second.pk, 2)],
        )
        self.assertFalse(published.technologies.exists())
        self.assertEqual(list(published.videos.all()), [self.trailer])
        self.assertFalse(TranslationKey.objects.filter(pk__in=old_keys).exists())
        self.assertEqual(
            self.store.get_text(draft.features.get().title_translation_key_id, "en"), "Hand-made floors"
        )

    def test_new_draft_publishes_its_children(self):
        draft = CreationDraft.objects.create(
            name="Tile editor",
            slug="tile-editor",
            started_at=datetime.date(2022, 3, 1),
            short_description_translation_key=self.make_key("Level editing"),
        )
        FeatureDraft.objects.create(creation_draft=draft, title_translation_key=self.make_key("Layers"))
        draft.technologies.add(self.godot)
        self.blocks.create_markdown_content(draft, self.make_key("Usage").pk)

        creation = self.converter.publish_draft(draft)

        self.assertEqual(self.store.get_text(creation.features.get().title_translation_key_id, "en"), "Layers")
        self.assertIsNone(creation.features.get().description_translation_key_id)
        self.assertEqual(list(creation.technologies.all()), [self.godot])

    def test_delete_draft_releases_child_keys(self):
        creation = self.make_creation()
        draft = self.converter.create_draft_from_published(creation)
        draft_keys = draft.features.get().owned_key_ids() + draft.screenshots.get().owned_key_ids()

        self.converter.delete_draft(draft)

        self.assertFalse(FeatureDraft.objects.exists())
        self.assertFalse(ScreenshotDraft.objects.exists())
        self.assertFalse(TranslationKey.objects.filter(pk__in=draft_keys).exists())
        self.assertEqual(creation.features.count(), 1)


class CreationDeletionPathTests(CreationFixtures, TestCase):
    def test_admin_delete_goes_through_the_converter(self):
        request = RequestFactory().post("/admin/")
        request.user = get_user_model().objects.create_superuser("admin", "admin@example.com", "pw")
        creation = self.make_creation()
        self.converter.create_draft_from_published(creation)

        admin.site._registry[Creation].delete_queryset(request, Creation.objects.all())

        self.assertFalse(CreationDraft.objects.exists())
        self.assertFalse(ContentGallery.objects.exists())
        self.assertFalse(TranslationKey.objects.exists())

    def test_cascading_draft_delete_takes_block_entities(self):
        draft = CreationDraft.objects.create(name="Scratch", slug="scratch")
        key = self.make_key("Notes")
        self.blocks.create_markdown_content(draft, key.pk)

        draft.delete()

        self.assertFalse(ContentMarkdown.objects.exists())
        self.assertFalse(TranslationKey.objects.filter(pk=key.pk).exists())
