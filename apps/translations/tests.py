from __future__ import annotations

import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.test import TestCase

from apps.content.models import ContentMarkdown
from apps.core.exceptions import NotFound, ValidationFailure
from apps.translations.models import Translation, TranslationKey
from apps.translations.services import TranslationKeyStore


class TranslationKeyStoreTests(TestCase):
    def setUp(self) -> None:
        self.store = TranslationKeyStore()

    def test_create_generates_unique_keys(self):
        first = self.store.create("home.title")
        second = self.store.create("home.title")
        anonymous = self.store.create()
        self.assertEqual(first.key, "home.title")
        self.assertEqual(second.key, "home.title_1")
        self.assertTrue(anonymous.key.startswith("content."))

    def test_set_text_upserts_per_locale(self):
        key = self.store.create("greeting")
        self.store.set_text(key.pk, "en", "Hello")
        self.store.set_text(key.pk, "en", "Hi")
        self.store.set_text(key.pk, "fr", "Salut")
        self.assertEqual(self.store.get_text(key.pk, "en"), "Hi")
        self.assertEqual(self.store.all_translations(key.pk), {"en": "Hi", "fr": "Salut"})
        self.assertIsNone(self.store.get_text(key.pk, "de"))

    def test_set_text_rejects_unknown_locale_and_key(self):
        key = self.store.create("greeting")
        with self.assertRaises(ValidationFailure):
            self.store.set_text(key.pk, "de", "Hallo")
        with self.assertRaises(NotFound):
            self.store.set_text(987654, "en", "Hello")

    def test_duplicate_copies_every_locale_under_suffix(self):
        key = self.store.create("about.body")
        self.store.set_text(key.pk, "en", "About")
        self.store.set_text(key.pk, "fr", "A propos")
        copy = self.store.duplicate(key.pk, "copy")
        again = self.store.duplicate(key.pk, "copy")
        draft = self.store.duplicate(key.pk, "draft")
        self.assertEqual(copy.key, "about.body_copy")
        self.assertEqual(again.key, "about.body_copy_1")
        self.assertEqual(draft.key, "about.body_draft")
        self.assertEqual(self.store.all_translations(copy.pk), {"en": "About", "fr": "A propos"})

    def test_duplicate_is_independent_of_source(self):
        key = self.store.create("about.body")
        self.store.set_text(key.pk, "en", "Original")
        copy = self.store.duplicate(key.pk, "copy")
        self.store.set_text(copy.pk, "en", "Modified")
        self.assertEqual(self.store.get_text(key.pk, "en"), "Original")

    def test_delete_cascades_texts(self):
        key = self.store.create("gone")
        self.store.set_text(key.pk, "en", "Bye")
        self.store.delete(key.pk)
        self.assertFalse(TranslationKey.objects.filter(pk=key.pk).exists())
        self.assertFalse(Translation.objects.filter(translation_key_id=key.pk).exists())
        self.store.delete(key.pk)

    def test_release_only_deletes_unreferenced_keys(self):
        key = self.store.create("body")
        markdown = ContentMarkdown.objects.create(translation_key=key)
        self.assertTrue(self.store.is_referenced(key.pk))
        self.assertFalse(self.store.release(key.pk))
        self.assertTrue(self.store.exists(key.pk))
        markdown.delete()
        self.assertTrue(self.store.release(key.pk))
        self.assertFalse(self.store.exists(key.pk))
        self.assertFalse(self.store.release(None))
