from __future__ import annotations

import itertools
import os
from datetime import date
from unittest.mock import patch

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.db import DatabaseError, IntegrityError, connection, transaction
from django.test import TestCase

from apps.blog.models import BlogCategory, BlogPost, BlogPostDraft
from apps.content.models import (
    ContentGallery,
    ContentKind,
    ContentMarkdown,
    ContentVideo,
    GalleryPicture,
)
from apps.content.services import ContentBlockService, ContentCopier
from apps.core.exceptions import NotFound, TransactionFailure, ValidationFailure
from apps.creations.models import Creation, CreationDraft
from apps.media.models import Picture, Video
from apps.translations.models import TranslationKey
from apps.translations.services import TranslationKeyStore

_seq = itertools.count(1)


class ContentFixtures:
    def setUp(self) -> None:
        self.store = TranslationKeyStore()
        self.service = ContentBlockService(store=self.store)
        self.category = BlogCategory.objects.create(name=f"News {next(_seq)}")

    def make_key(self, text: str = "Hello", key: str | None = None) -> TranslationKey:
        translation_key = self.store.create(key)
        self.store.set_text(translation_key.pk, "en", text)
        return translation_key

    def make_picture(self) -> Picture:
        return Picture.objects.create(filename=f"picture-{next(_seq)}.jpg")

    def make_video(self) -> Video:
        return Video.objects.create(name=f"Clip {next(_seq)}")

    def make_blog_post_draft(self) -> BlogPostDraft:
        return BlogPostDraft.objects.create(slug=f"draft-{next(_seq)}")

    def make_blog_post(self) -> BlogPost:
        return BlogPost.objects.create(
            slug=f"post-{next(_seq)}",
            title_translation_key=self.make_key("Title"),
            category=self.category,
        )

    def make_creation_draft(self) -> CreationDraft:
        return CreationDraft.objects.create(name="Draft creation", slug=f"creation-draft-{next(_seq)}")

    def make_creation(self) -> Creation:
        return Creation.objects.create(
            name="Creation",
            slug=f"creation-{next(_seq)}",
            started_at=date(2024, 1, 1),
            short_description_translation_key=self.make_key("Short"),
        )

    def all_parents(self):
        return [
            self.make_blog_post_draft(),
            self.make_blog_post(),
            self.make_creation_draft(),
            self.make_creation(),
        ]

    def orders(self, *blocks):
        return [type(b).objects.get(pk=b.pk).order for b in blocks]


class ContentCreationTests(ContentFixtures, TestCase):
    def test_markdown_block_on_every_parent_kind(self):
        for parent in self.all_parents():
            key = self.make_key()
            block = self.service.create_markdown_content(parent, key.pk)
            self.assertEqual(block.parent, parent)
            self.assertEqual(block.content_type, ContentKind.MARKDOWN)
            self.assertEqual(block.order, 1)
            self.assertEqual(block.content.translation_key_id, key.pk)

    def test_order_is_appended_after_current_maximum(self):
        parent = self.make_blog_post_draft()
        first = self.service.create_markdown_content(parent, self.make_key().pk)
        second = self.service.create_video_content(parent, self.make_video().pk)
        explicit = self.service.create_markdown_content(parent, self.make_key().pk, order=7)
        appended = self.service.create_gallery_content(parent, {"layout": "grid"})
        self.assertEqual([first.order, second.order, explicit.order, appended.order], [1, 2, 7, 8])

    def test_explicit_order_must_be_positive(self):
        parent = self.make_blog_post_draft()
        with self.assertRaises(ValidationFailure):
            self.service.create_markdown_content(parent, self.make_key().pk, order=0)

    def test_gallery_pictures_are_numbered_from_one_without_captions(self):
        parent = self.make_creation_draft()
        p1, p2, p3 = self.make_picture(), self.make_picture(), self.make_picture()
        block = self.service.create_gallery_content(
            parent, {"layout": "masonry", "columns": 3, "pictures": [p1.pk, p2.pk, p3.pk]}
        )
        gallery = block.content
        self.assertEqual(gallery.layout, "masonry")
        self.assertEqual(gallery.columns, 3)
        slots = list(gallery.slots())
        self.assertEqual([s.picture_id for s in slots], [p1.pk, p2.pk, p3.pk])
        self.assertEqual([s.order for s in slots], [1, 2, 3])
        self.assertTrue(all(s.caption_translation_key_id is None for s in slots))

    def test_gallery_without_pictures_is_empty(self):
        parent = self.make_blog_post()
        block = self.service.create_gallery_content(parent, {"layout": "grid", "pictures": []})
        self.assertEqual(block.content.gallery_pictures.count(), 0)
        block = self.service.create_gallery_content(parent, {"layout": "grid"})
        self.assertEqual(block.content.gallery_pictures.count(), 0)
        self.assertIsNone(block.content.columns)

    def test_gallery_captions_create_keys_in_first_locale(self):
        parent = self.make_blog_post_draft()
        p1, p2 = self.make_picture(), self.make_picture()
        block = self.service.create_gallery_content(
            parent, {"layout": "grid", "pictures": [p1.pk, p2.pk], "captions": ["Sunset", ""]}
        )
        first, second = block.content.slots()
        self.assertEqual(self.store.get_text(first.caption_translation_key_id, "en"), "Sunset")
        self.assertIsNone(second.caption_translation_key_id)

    def test_gallery_rejects_unknown_layout_and_bad_columns(self):
        parent = self.make_blog_post_draft()
        with self.assertRaises(ValidationFailure):
            self.service.create_gallery_content(parent, {"layout": "spiral"})
        with self.assertRaises(ValidationFailure):
            self.service.create_gallery_content(parent, {"layout": "grid", "columns": 0})
        self.assertEqual(ContentGallery.objects.count(), 0)

    def test_video_block_with_and_without_caption(self):
        parent = self.make_creation()
        video = self.make_video()
        caption = self.make_key("Caption")
        with_caption = self.service.create_video_content(parent, video.pk, caption_translation_key_id=caption.pk)
        without = self.service.create_video_content(parent, video.pk)
        self.assertEqual(with_caption.content.caption_translation_key_id, caption.pk)
        self.assertIsNone(without.content.caption_translation_key_id)
        self.assertEqual(without.order, 2)

    def test_missing_references_raise_not_found(self):
        parent = self.make_blog_post_draft()
        with self.assertRaises(NotFound):
            self.service.create_markdown_content(parent, 987654)
        with self.assertRaises(NotFound):
            self.service.create_video_content(parent, 987654)
        with self.assertRaises(NotFound):
            self.service.create_video_content(parent, self.make_video().pk, caption_translation_key_id=987654)
        with self.assertRaises(NotFound):
            self.service.create_gallery_content(parent, {"layout": "grid", "pictures": [self.make_picture().pk, 987654]})
        with self.assertRaises(NotFound):
            self.service.create_markdown_content(BlogPostDraft(slug="unsaved"), self.make_key().pk)
        self.assertEqual(parent.contents.count(), 0)
        self.assertEqual(ContentGallery.objects.count(), 0)

    def test_storage_failure_rolls_back_gallery(self):
        parent = self.make_blog_post_draft()
        picture = self.make_picture()
        with patch.object(GalleryPicture.objects, "bulk_create", side_effect=DatabaseError("disk full")):
            with self.assertRaises(TransactionFailure):
                self.service.create_gallery_content(parent, {"layout": "grid", "pictures": [picture.pk]})
        self.assertEqual(ContentGallery.objects.count(), 0)
        self.assertEqual(parent.contents.count(), 0)

    def test_creation_is_logged_as_structured_event(self):
        parent = self.make_blog_post_draft()
        with self.assertLogs("apps.content.services.blocks", level="INFO") as cm:
            self.service.create_markdown_content(parent, self.make_key().pk)
        record = cm.records[-1]
        self.assertEqual(record.getMessage(), "content.block.created")
        self.assertEqual(record.event["content_type"], ContentKind.MARKDOWN)
        self.assertEqual(record.event["order"], 1)


class ContentUpdateTests(ContentFixtures, TestCase):
    def test_markdown_repoint_keeps_old_key(self):
        parent = self.make_blog_post_draft()
        old_key, new_key = self.make_key("Old"), self.make_key("New")
        markdown = self.service.create_markdown_content(parent, old_key.pk).content
        updated = self.service.update_markdown_content(markdown, new_key.pk)
        self.assertEqual(updated.translation_key_id, new_key.pk)
        self.assertTrue(TranslationKey.objects.filter(pk=old_key.pk).exists())

    def test_markdown_repoint_to_missing_key(self):
        markdown = self.service.create_markdown_content(self.make_blog_post_draft(), self.make_key().pk).content
        with self.assertRaises(NotFound):
            self.service.update_markdown_content(markdown, 987654)

    def test_updates_on_a_vanished_entity_raise_not_found(self):
        parent = self.make_blog_post_draft()
        markdown = self.service.create_markdown_content(parent, self.make_key().pk).content
        gallery = self.service.create_gallery_content(parent, {"layout": "grid"}).content
        video_content = self.service.create_video_content(parent, self.make_video().pk).content
        for entity in (markdown, gallery, video_content):
            type(entity).objects.filter(pk=entity.pk).delete()

        with self.assertRaises(NotFound):
            self.service.update_markdown_content(markdown, self.make_key().pk)
        with self.assertRaises(NotFound):
            self.service.update_gallery_content(gallery, {"layout": "stack"})
        with self.assertRaises(NotFound):
            self.service.update_video_content(video_content, self.make_video().pk)

    def test_gallery_update_replaces_pictures_when_listed(self):
        parent = self.make_blog_post_draft()
        p1, p2, p3 = self.make_picture(), self.make_picture(), self.make_picture()
        gallery = self.service.create_gallery_content(
            parent, {"layout": "grid", "pictures": [p1.pk, p2.pk], "captions": ["One"]}
        ).content
        caption_key_id = gallery.slots().first().caption_translation_key_id

        gallery = self.service.update_gallery_content(
            gallery, {"layout": "carousel", "columns": None, "pictures": [p3.pk, p1.pk]}
        )
        self.assertEqual(gallery.layout, "carousel")
        self.assertIsNone(gallery.columns)
        self.assertEqual([(s.picture_id, s.order) for s in gallery.slots()], [(p3.pk, 1), (p1.pk, 2)])
        self.assertFalse(TranslationKey.objects.filter(pk=caption_key_id).exists())

    def test_gallery_update_with_empty_list_detaches_everything(self):
        pictures = [self.make_picture() for _ in range(3)]
        gallery = self.service.create_gallery_content(
            self.make_blog_post(), {"layout": "grid", "pictures": [p.pk for p in pictures]}
        ).content
        gallery = self.service.update_gallery_content(gallery, {"layout": "grid", "pictures": []})
        self.assertEqual(gallery.gallery_pictures.count(), 0)
        self.assertEqual(Picture.objects.filter(pk__in=[p.pk for p in pictures]).count(), 3)

    def test_gallery_update_without_pictures_leaves_attachments(self):
        p1, p2 = self.make_picture(), self.make_picture()
        gallery = self.service.create_gallery_content(
            self.make_creation(), {"layout": "grid", "columns": 2, "pictures": [p1.pk, p2.pk]}
        ).content
        gallery = self.service.update_gallery_content(gallery, {"layout": "stack", "columns": 4})
        self.assertEqual(gallery.layout, "stack")
        self.assertEqual(gallery.columns, 4)
        self.assertEqual([s.picture_id for s in gallery.slots()], [p1.pk, p2.pk])

    def test_video_update_repoints_and_clears_caption(self):
        caption = self.make_key("Caption")
        video_content = self.service.create_video_content(
            self.make_creation_draft(), self.make_video().pk, caption_translation_key_id=caption.pk
        ).content
        other_video = self.make_video()
        updated = self.service.update_video_content(video_content, other_video.pk)
        self.assertEqual(updated.video_id, other_video.pk)
        self.assertIsNone(updated.caption_translation_key_id)
        self.assertTrue(TranslationKey.objects.filter(pk=caption.pk).exists())


class ContentOrderingTests(ContentFixtures, TestCase):
    def make_blocks(self, parent, count):
        return [self.service.create_markdown_content(parent, self.make_key().pk) for _ in range(count)]

    def test_full_reorder_assigns_positions(self):
        parent = self.make_blog_post()
        b1, b2, b3, b4 = self.make_blocks(parent, 4)
        self.service.reorder_content(parent, [b3.pk, b1.pk, b4.pk, b2.pk])
        self.assertEqual(self.orders(b3, b1, b4, b2), [1, 2, 3, 4])

    def test_partial_reorder_leaves_unlisted_blocks(self):
        parent = self.make_creation_draft()
        b1, b2, b3, b4, b5 = self.make_blocks(parent, 5)
        self.service.reorder_content(parent, [b2.pk, b1.pk])
        self.assertEqual(self.orders(b2, b1), [1, 2])
        self.assertEqual(self.orders(b3, b4, b5), [3, 4, 5])

    def enforce_unique_order(self, parent):
        """Add a (parent, order) unique index for the rest of the test."""
        table = parent.block_model._meta.db_table
        with connection.cursor() as cursor:
            cursor.execute(
                f'CREATE UNIQUE INDEX "{table}_unique_order" ON "{table}" ("parent_id", "order")'
            )

    def test_swap_on_every_parent_kind_under_unique_order(self):
        for parent in self.all_parents():
            a, b, c = self.make_blocks(parent, 3)
            self.enforce_unique_order(parent)
            self.service.reorder_content(parent, [b.pk, a.pk])
            self.assertEqual(self.orders(a, b, c), [2, 1, 3])
            self.service.reorder_content(parent, [c.pk, b.pk, a.pk])
            self.assertEqual(self.orders(a, b, c), [3, 2, 1])

    def test_unique_order_index_rejects_a_direct_swap(self):
        parent = self.make_blog_post()
        a, b = self.make_blocks(parent, 2)
        self.enforce_unique_order(parent)
        with self.assertRaises(IntegrityError), transaction.atomic():
            parent.contents.filter(pk=b.pk).update(order=1)
        self.assertEqual(self.orders(a, b), [1, 2])

    def test_empty_reorder_is_a_no_op(self):
        parent = self.make_blog_post_draft()
        with self.assertNumQueries(0):
            self.service.reorder_content(parent, [])

    def test_reorder_rejects_blocks_of_another_parent(self):
        parent, other = self.make_blog_post_draft(), self.make_blog_post_draft()
        (mine,) = self.make_blocks(parent, 1)
        (theirs,) = self.make_blocks(other, 1)
        with self.assertRaises(ValidationFailure):
            self.service.reorder_content(parent, [theirs.pk, mine.pk])
        self.assertEqual(self.orders(mine, theirs), [1, 1])

    def test_reorder_rejects_repeated_and_unknown_ids(self):
        parent = self.make_blog_post_draft()
        a, b = self.make_blocks(parent, 2)
        with self.assertRaises(ValidationFailure):
            self.service.reorder_content(parent, [a.pk, a.pk])
        with self.assertRaises(NotFound):
            self.service.reorder_content(parent, [b.pk, 987654])
        self.assertEqual(self.orders(a, b), [1, 2])

    def test_move_to_renumbers_contiguously(self):
        parent = self.make_creation()
        b1, b2, b3, b4 = self.make_blocks(parent, 4)
        self.service.move_to(parent, b4.pk, 1)
        self.assertEqual(self.orders(b4, b1, b2, b3), [1, 2, 3, 4])
        self.service.move_to(parent, b4.pk, 99)
        self.assertEqual(self.orders(b1, b2, b3, b4), [1, 2, 3, 4])

    def test_move_up_and_down(self):
        parent = self.make_blog_post_draft()
        b1, b2, b3 = self.make_blocks(parent, 3)
        self.service.move_up(parent, b3.pk)
        self.assertEqual(self.orders(b1, b3, b2), [1, 2, 3])
        self.service.move_down(parent, b1.pk)
        self.assertEqual(self.orders(b3, b1, b2), [1, 2, 3])
        self.service.move_up(parent, b3.pk)
        self.service.move_down(parent, b2.pk)
        self.assertEqual(self.orders(b3, b1, b2), [1, 2, 3])

    def test_move_unknown_block(self):
        parent = self.make_blog_post_draft()
        with self.assertRaises(NotFound):
            self.service.move_up(parent, 987654)


class ContentDeletionTests(ContentFixtures, TestCase):
    def test_gallery_delete_keeps_pictures_and_drops_captions(self):
        parent = self.make_blog_post_draft()
        p1, p2 = self.make_picture(), self.make_picture()
        block = self.service.create_gallery_content(
            parent, {"layout": "grid", "pictures": [p1.pk, p2.pk], "captions": ["First"]}
        )
        gallery_id = block.content_id
        caption_id = block.content.slots().first().caption_translation_key_id

        self.assertTrue(self.service.delete_content(block))
        self.assertFalse(ContentGallery.objects.filter(pk=gallery_id).exists())
        self.assertFalse(GalleryPicture.objects.filter(gallery_id=gallery_id).exists())
        self.assertFalse(TranslationKey.objects.filter(pk=caption_id).exists())
        self.assertEqual(Picture.objects.filter(pk__in=[p1.pk, p2.pk]).count(), 2)
        self.assertEqual(parent.contents.count(), 0)

    def test_video_delete_keeps_video_and_drops_caption(self):
        parent = self.make_creation()
        video = self.make_video()
        caption = self.make_key("Caption")
        block = self.service.create_video_content(parent, video.pk, caption_translation_key_id=caption.pk)
        self.service.delete_content(block)
        self.assertFalse(ContentVideo.objects.filter(pk=block.content_id).exists())
        self.assertFalse(TranslationKey.objects.filter(pk=caption.pk).exists())
        self.assertTrue(Video.objects.filter(pk=video.pk).exists())

    def test_markdown_delete_drops_owned_key(self):
        key = self.make_key()
        block = self.service.create_markdown_content(self.make_blog_post(), key.pk)
        self.service.delete_content(block)
        self.assertFalse(ContentMarkdown.objects.filter(pk=block.content_id).exists())
        self.assertFalse(TranslationKey.objects.filter(pk=key.pk).exists())

    def test_shared_key_survives_until_last_holder_is_deleted(self):
        key = self.make_key()
        parent = self.make_blog_post_draft()
        original = self.service.create_markdown_content(parent, key.pk)
        duplicate = self.service.duplicate_content(original)
        self.service.delete_content(original)
        self.assertTrue(TranslationKey.objects.filter(pk=key.pk).exists())
        self.service.delete_content(duplicate)
        self.assertFalse(TranslationKey.objects.filter(pk=key.pk).exists())

    def test_deleting_twice_raises_not_found(self):
        block = self.service.create_markdown_content(self.make_blog_post_draft(), self.make_key().pk)
        self.service.delete_content(block)
        with self.assertRaises(NotFound):
            self.service.delete_content(block)


class ContentDuplicationTests(ContentFixtures, TestCase):
    def test_markdown_duplicate_shares_key(self):
        parent = self.make_blog_post_draft()
        key = self.make_key()
        original = self.service.create_markdown_content(parent, key.pk)
        self.service.create_video_content(parent, self.make_video().pk, order=5)
        copy = self.service.duplicate_content(original)
        self.assertNotEqual(copy.content_id, original.content_id)
        self.assertEqual(copy.content.translation_key_id, key.pk)
        self.assertEqual(copy.order, 6)
        self.assertEqual(copy.parent, parent)

    def test_gallery_duplicate_shares_pictures_orders_and_captions(self):
        parent = self.make_creation_draft()
        p1, p2 = self.make_picture(), self.make_picture()
        original = self.service.create_gallery_content(
            parent, {"layout": "grid", "columns": 2, "pictures": [p1.pk, p2.pk], "captions": ["k1"]}
        )
        copy = self.service.duplicate_content(original)
        source_slots = [(s.picture_id, s.order, s.caption_translation_key_id) for s in original.content.slots()]
        copy_slots = [(s.picture_id, s.order, s.caption_translation_key_id) for s in copy.content.slots()]
        self.assertEqual(source_slots, copy_slots)
        self.assertIsNotNone(copy_slots[0][2])
        self.assertIsNone(copy_slots[1][2])
        self.assertEqual(copy.content.columns, 2)
        self.assertEqual(copy.order, 2)

    def test_video_duplicate_keeps_references(self):
        parent = self.make_creation()
        caption = self.make_key("Caption")
        original = self.service.create_video_content(parent, self.make_video().pk, caption_translation_key_id=caption.pk)
        copy = self.service.duplicate_content(original)
        self.assertEqual(copy.content.video_id, original.content.video_id)
        self.assertEqual(copy.content.caption_translation_key_id, caption.pk)

    def test_deep_copy_duplicates_keys_for_every_locale(self):
        key = self.make_key("Hello", key="article.body")
        self.store.set_text(key.pk, "fr", "Bonjour")
        markdown = self.service.create_markdown_content(self.make_blog_post_draft(), key.pk).content
        clone = ContentCopier(self.store).clone_entity(markdown, "copy")
        self.assertNotEqual(clone.translation_key_id, key.pk)
        self.assertEqual(clone.translation_key.key, "article.body_copy")
        self.assertEqual(self.store.all_translations(clone.translation_key_id), {"en": "Hello", "fr": "Bonjour"})


class ContentStructureTests(ContentFixtures, TestCase):
    def test_structure_requires_one_block_for_every_parent_kind(self):
        for parent in self.all_parents():
            self.assertFalse(self.service.validate_content_structure(parent))
            self.assertFalse(self.service.has_content(parent))
            self.service.create_markdown_content(parent, self.make_key().pk)
            self.assertTrue(self.service.validate_content_structure(parent))
            self.assertEqual(self.service.content_count(parent), 1)

    def test_get_block_is_scoped_to_parent(self):
        parent, other = self.make_blog_post_draft(), self.make_blog_post_draft()
        block = self.service.create_markdown_content(other, self.make_key().pk)
        with self.assertRaises(NotFound):
            self.service.get_block(parent, block.pk)
        self.assertEqual(self.service.get_block(other, block.pk), block)
