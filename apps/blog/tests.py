from __future__ import annotations

import os
from unittest.mock import patch

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "folio.settings_test")
os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret")
django.setup()

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import RequestFactory, TestCase

from apps.blog.admin import BlogPostContentInline
from apps.blog.models import (
    BlogCategory,
    BlogPost,
    BlogPostContent,
    BlogPostDraft,
    BlogPostType,
    GameReview,
    GameReviewDraft,
    GameReviewLink,
    GameReviewLinkType,
)
from apps.blog.services import BlogPostConverter
from apps.content.models import ContentGallery, ContentKind, ContentMarkdown, ContentVideo
from apps.content.services import ContentBlockService
from apps.core.exceptions import EmptyContentFailure, NotFound, TransactionFailure, ValidationFailure
from apps.core.utils import feature_flags
from apps.media.models import Picture, Video, VideoStatus
from apps.site_settings.models import PublishingSettings
from apps.translations.models import TranslationKey
from apps.translations.services import TranslationKeyStore


class BlogConverterFixtures:
    def setUp(self) -> None:
        feature_flags.reset_cache()
        self.store = TranslationKeyStore()
        self.blocks = ContentBlockService(store=self.store)
        self.converter = BlogPostConverter(blocks=self.blocks)
        self.category = BlogCategory.objects.create(name="Reviews")

    def tearDown(self) -> None:
        feature_flags.reset_cache()

    def make_key(self, text: str, key: str | None = None) -> TranslationKey:
        translation_key = self.store.create(key)
        self.store.set_text(translation_key.pk, "en", text)
        return translation_key

    def make_ready_video(self) -> Video:
        cover = Picture.objects.create(filename="cover.jpg")
        return Video.objects.create(name="Trailer", status=VideoStatus.READY, cover_picture=cover)

    def make_post(self, slug: str = "hello-world") -> BlogPost:
        post = BlogPost.objects.create(
            slug=slug,
            title_translation_key=self.make_key("Hello world", key=f"{slug}.title"),
            category=self.category,
        )
        self.blocks.create_markdown_content(post, self.make_key("Original", key=f"{slug}.body").pk)
        return post

    def make_draft(self, slug: str = "fresh-post") -> BlogPostDraft:
        return BlogPostDraft.objects.create(
            slug=slug,
            title_translation_key=self.make_key("Fresh", key=f"{slug}.title"),
            category=self.category,
        )

    def markdown_keys(self, parent):
        blocks = parent.ordered_contents().filter(content_type=ContentKind.MARKDOWN)
        return [block.content.translation_key_id for block in blocks]


class CreateDraftFromPublishedTests(BlogConverterFixtures, TestCase):
    def test_draft_copies_scalars_and_deep_copies_keys(self):
        post = self.make_post()
        self.store.set_text(post.title_translation_key_id, "fr", "Bonjour le monde")
        picture = Picture.objects.create(filename="shot.jpg")
        self.blocks.create_gallery_content(post, {"layout": "grid", "pictures": [picture.pk], "captions": ["Shot"]})
        self.blocks.create_video_content(
            post, self.make_ready_video().pk, caption_translation_key_id=self.make_key("Caption").pk
        )

        draft = self.converter.create_draft_from_published(post)

        self.assertEqual(draft.original_blog_post, post)
        self.assertEqual((draft.slug, draft.type, draft.category_id), (post.slug, post.type, post.category_id))
        self.assertNotEqual(draft.title_translation_key_id, post.title_translation_key_id)
        self.assertEqual(draft.title_translation_key.key, "hello-world.title_draft")
        self.assertEqual(
            self.store.all_translations(draft.title_translation_key_id),
            {"en": "Hello world", "fr": "Bonjour le monde"},
        )

        source = list(post.ordered_contents())
        copies = list(draft.ordered_contents())
        self.assertEqual([b.content_type for b in copies], [b.content_type for b in source])
        self.assertEqual([b.order for b in copies], [1, 2, 3])

        markdown, gallery, video = (b.content for b in copies)
        self.assertEqual(markdown.translation_key.key, "hello-world.body_copy")
        self.assertEqual(self.store.get_text(markdown.translation_key_id, "en"), "Original")
        slot = gallery.slots().get()
        source_slot = source[1].content.slots().get()
        self.assertEqual(slot.picture_id, picture.pk)
        self.assertNotEqual(slot.caption_translation_key_id, source_slot.caption_translation_key_id)
        self.assertEqual(self.store.get_text(slot.caption_translation_key_id, "en"), "Shot")
        self.assertEqual(video.video_id, source[2].content.video_id)
        self.assertNotEqual(video.caption_translation_key_id, source[2].content.caption_translation_key_id)

    def test_draft_edits_never_reach_published_text(self):
        post = self.make_post()
        published_key = self.markdown_keys(post)[0]
        draft = self.converter.create_draft_from_published(post)
        draft_key = self.markdown_keys(draft)[0]

        self.store.set_text(draft_key, "en", "Modified")

        self.assertEqual(self.store.get_text(published_key, "en"), "Original")

    def test_existing_draft_is_returned(self):
        post = self.make_post()
        first = self.converter.create_draft_from_published(post)
        second = self.converter.create_draft_from_published(post)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(BlogPostDraft.objects.filter(original_blog_post=post).count(), 1)
        self.assertEqual(first.contents.count(), 1)

    def test_unsaved_post_is_not_found(self):
        with self.assertRaises(NotFound):
            self.converter.create_draft_from_published(BlogPost(slug="ghost"))


class PublishDraftTests(BlogConverterFixtures, TestCase):
    def test_new_draft_creates_post_and_links_back(self):
        draft = self.make_draft()
        self.blocks.create_markdown_content(draft, self.make_key("Intro").pk)
        self.blocks.create_video_content(draft, self.make_ready_video().pk)

        post = self.converter.publish_draft(draft)

        draft.refresh_from_db()
        self.assertEqual(draft.original_blog_post, post)
        self.assertEqual(post.slug, "fresh-post")
        self.assertNotEqual(post.title_translation_key_id, draft.title_translation_key_id)
        self.assertEqual(self.store.get_text(post.title_translation_key_id, "en"), "Fresh")
        self.assertEqual(
            [(b.content_type, b.order) for b in post.ordered_contents()],
            [(ContentKind.MARKDOWN, 1), (ContentKind.VIDEO, 2)],
        )
        self.assertNotEqual(self.markdown_keys(post)[0], self.markdown_keys(draft)[0])

    def test_publish_in_place_retires_superseded_content(self):
        post = self.make_post()
        old_block = post.ordered_contents().get()
        old_entity_id, old_key_id = old_block.content_id, old_block.content.translation_key_id
        old_title_id = post.title_translation_key_id

        draft = self.converter.create_draft_from_published(post)
        draft_block = draft.ordered_contents().get()
        draft_key_id = draft_block.content.translation_key_id
        self.store.set_text(draft_key_id, "en", "Rewritten")
        draft.slug = "hello-world-v2"
        draft.save()

        published = self.converter.publish_draft(draft)

        self.assertEqual(published.pk, post.pk)
        self.assertEqual(published.slug, "hello-world-v2")
        self.assertFalse(ContentMarkdown.objects.filter(pk=old_entity_id).exists())
        self.assertFalse(TranslationKey.objects.filter(pk=old_key_id).exists())
        self.assertFalse(TranslationKey.objects.filter(pk=old_title_id).exists())
        new_key_id = self.markdown_keys(published)[0]
        self.assertNotIn(new_key_id, (old_key_id, draft_key_id))
        self.assertEqual(self.store.get_text(new_key_id, "en"), "Rewritten")

        draft_block.refresh_from_db()
        self.assertEqual(draft_block.content.translation_key_id, draft_key_id)
        self.assertEqual(self.store.get_text(draft_key_id, "en"), "Rewritten")

    def test_draft_can_be_published_repeatedly(self):
        draft = self.make_draft()
        self.blocks.create_markdown_content(draft, self.make_key("One").pk)
        self.blocks.create_markdown_content(draft, self.make_key("Two").pk)
        post = self.converter.publish_draft(draft)
        first_keys = self.markdown_keys(post)

        draft.refresh_from_db()
        again = self.converter.publish_draft(draft)

        self.assertEqual(again.pk, post.pk)
        self.assertEqual(BlogPost.objects.count(), 1)
        self.assertEqual([b.order for b in again.ordered_contents()], [1, 2])
        self.assertFalse(TranslationKey.objects.filter(pk__in=first_keys).exists())
        texts = [self.store.get_text(k, "en") for k in self.markdown_keys(again)]
        self.assertEqual(texts, ["One", "Two"])

    def test_empty_draft_is_refused_by_default(self):
        draft = self.make_draft()
        with self.assertRaises(EmptyContentFailure):
            self.converter.publish_draft(draft)
        self.assertEqual(BlogPost.objects.count(), 0)

    def test_empty_draft_is_published_when_allowed(self):
        ps = PublishingSettings.get_solo()
        ps.allow_empty_publish = True
        ps.save()
        post = self.converter.publish_draft(self.make_draft())
        self.assertEqual(post.contents.count(), 0)

    def test_incomplete_draft_reports_each_field(self):
        draft = BlogPostDraft.objects.create()
        self.blocks.create_markdown_content(draft, self.make_key("Body").pk)
        with self.assertRaises(ValidationFailure) as ctx:
            self.converter.publish_draft(draft)
        self.assertEqual(
            set(ctx.exception.message_dict),
            {"slug", "title_translation_key", "category"},
        )

    def test_slug_already_published_elsewhere(self):
        self.make_post(slug="taken")
        draft = self.make_draft(slug="taken")
        self.blocks.create_markdown_content(draft, self.make_key("Body").pk)
        with self.assertRaises(ValidationFailure) as ctx:
            self.converter.publish_draft(draft)
        self.assertIn("slug", ctx.exception.message_dict)

    def test_videos_must_be_ready_with_cover(self):
        draft = self.make_draft()
        pending = Video.objects.create(name="Raw footage")
        self.blocks.create_video_content(draft, pending.pk)
        with self.assertRaises(ValidationFailure) as ctx:
            self.converter.publish_draft(draft)
        self.assertIn("Raw footage", ctx.exception.message_dict["videos"][0])

    def test_failure_while_retiring_leaves_post_untouched(self):
        post = self.make_post()
        old_contents = list(post.ordered_contents().values_list("pk", "content_id"))
        draft = self.converter.create_draft_from_published(post)
        draft.slug = "renamed"
        draft.save()

        with patch.object(self.converter.copier, "retire", side_effect=DatabaseError("lock timeout")):
            with self.assertRaises(TransactionFailure):
                self.converter.publish_draft(draft)

        post.refresh_from_db()
        self.assertEqual(post.slug, "hello-world")
        self.assertEqual(list(post.ordered_contents().values_list("pk", "content_id")), old_contents)

    def test_publish_is_logged(self):
        draft = self.make_draft()
        self.blocks.create_markdown_content(draft, self.make_key("Body").pk)
        with self.assertLogs("apps.content.services.conversion", level="INFO") as cm:
            post = self.converter.publish_draft(draft)
        record = cm.records[-1]
        self.assertEqual(record.getMessage(), "blog.draft.published")
        self.assertEqual(record.event["published_id"], post.pk)
        self.assertTrue(record.event["created"])


class GameReviewConversionTests(BlogConverterFixtures, TestCase):
    def make_review_post(self) -> BlogPost:
        post = self.make_post(slug="zelda")
        post.type = BlogPostType.GAME_REVIEW
        post.save()
        review = GameReview.objects.create(
            blog_post=post,
            game_title="Zelda",
            platforms=["switch"],
            rating=9,
            pros_translation_key=self.make_key("Open world", key="zelda.pros"),
            cons_translation_key=self.make_key("Weapon durability", key="zelda.cons"),
        )
        GameReviewLink.objects.create(
            game_review=review,
            type=GameReviewLinkType.NINTENDO,
            url="https://example.com/zelda",
            label_translation_key=self.make_key("Buy", key="zelda.link"),
            order=1,
        )
        return post

    def test_draft_gets_an_independent_review(self):
        post = self.make_review_post()
        draft = self.converter.create_draft_from_published(post)
        review = post.game_review
        review_draft = draft.game_review_draft

        self.assertEqual((review_draft.game_title, review_draft.platforms, review_draft.rating), ("Zelda", ["switch"], 9))
        self.assertEqual(review_draft.pros_translation_key.key, "zelda.pros_draft")
        self.assertNotEqual(review_draft.cons_translation_key_id, review.cons_translation_key_id)
        link = review_draft.links.get()
        self.assertEqual((link.type, link.url, link.order), (GameReviewLinkType.NINTENDO, "https://example.com/zelda", 1))
        self.assertEqual(link.label_translation_key.key, "zelda.link_draft")

    def test_review_is_updated_in_place_on_publish(self):
        post = self.make_review_post()
        review_id = post.game_review.pk
        old_pros = post.game_review.pros_translation_key_id
        draft = self.converter.create_draft_from_published(post)
        review_draft = draft.game_review_draft
        review_draft.game_title = "Zelda: Tears of the Kingdom"
        review_draft.rating = 10
        review_draft.save()

        self.converter.publish_draft(draft)

        review = GameReview.objects.get(blog_post=post)
        self.assertEqual(review.pk, review_id)
        self.assertEqual((review.game_title, review.rating), ("Zelda: Tears of the Kingdom", 10))
        self.assertNotIn(review.pros_translation_key_id, (old_pros, review_draft.pros_translation_key_id))
        self.assertFalse(TranslationKey.objects.filter(pk=old_pros).exists())
        self.assertEqual(review.links.count(), 1)
        self.assertEqual(self.store.get_text(review.links.get().label_translation_key_id, "en"), "Buy")

    def test_new_review_post_creates_review(self):
        draft = self.make_draft(slug="hades")
        draft.type = BlogPostType.GAME_REVIEW
        draft.save()
        GameReviewDraft.objects.create(blog_post_draft=draft, game_title="Hades", rating=9)
        self.blocks.create_markdown_content(draft, self.make_key("Body").pk)

        post = self.converter.publish_draft(draft)

        self.assertEqual(post.game_review.game_title, "Hades")

    def test_switching_to_article_drops_published_review(self):
        post = self.make_review_post()
        review = post.game_review
        owned = [review.pros_translation_key_id, review.cons_translation_key_id, review.links.get().label_translation_key_id]
        draft = self.converter.create_draft_from_published(post)
        draft.type = BlogPostType.ARTICLE
        draft.save()

        self.converter.publish_draft(draft)

        self.assertFalse(GameReview.objects.filter(blog_post=post).exists())
        self.assertFalse(TranslationKey.objects.filter(pk__in=owned).exists())
        self.assertTrue(GameReviewDraft.objects.filter(blog_post_draft=draft).exists())


class DeletionTests(BlogConverterFixtures, TestCase):
    def test_delete_draft_leaves_published_post(self):
        post = self.make_post()
        published_keys = self.markdown_keys(post)
        draft = self.converter.create_draft_from_published(post)
        draft_keys = self.markdown_keys(draft) + [draft.title_translation_key_id]

        self.assertTrue(self.converter.delete_draft(draft))

        self.assertFalse(BlogPostDraft.objects.filter(pk=draft.pk).exists())
        self.assertFalse(TranslationKey.objects.filter(pk__in=draft_keys).exists())
        self.assertEqual(self.markdown_keys(post), published_keys)
        self.assertTrue(TranslationKey.objects.filter(pk=post.title_translation_key_id).exists())

    def test_delete_published_removes_its_drafts(self):
        post = self.make_post()
        draft = self.converter.create_draft_from_published(post)
        key_ids = self.markdown_keys(post) + self.markdown_keys(draft)

        self.assertTrue(self.converter.delete_published(post))

        self.assertFalse(BlogPost.objects.filter(pk=post.pk).exists())
        self.assertFalse(BlogPostDraft.objects.filter(pk=draft.pk).exists())
        self.assertFalse(ContentMarkdown.objects.exists())
        self.assertFalse(TranslationKey.objects.filter(pk__in=key_ids).exists())

    def test_delete_published_with_review_releases_review_keys(self):
        post = self.make_post(slug="celeste")
        post.type = BlogPostType.GAME_REVIEW
        post.save()
        pros = self.make_key("Tight controls")
        GameReview.objects.create(blog_post=post, game_title="Celeste", pros_translation_key=pros)
        self.converter.create_draft_from_published(post)

        self.converter.delete_published(post)

        self.assertFalse(GameReview.objects.exists())
        self.assertFalse(GameReviewDraft.objects.exists())
        self.assertFalse(TranslationKey.objects.exists())


class AdminDeletionTests(BlogConverterFixtures, TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.request = RequestFactory().post("/admin/")
        self.request.user = get_user_model().objects.create_superuser("admin", "admin@example.com", "pw")

    def test_entities_cannot_be_added_or_deleted_on_their_own(self):
        post = self.make_post()
        entity = post.ordered_contents().get().content
        for model in (ContentMarkdown, ContentGallery, ContentVideo):
            model_admin = admin.site._registry[model]
            self.assertFalse(model_admin.has_add_permission(self.request))
            self.assertFalse(model_admin.has_delete_permission(self.request, entity))

    def test_block_inline_is_read_only(self):
        post = self.make_post()
        inline = BlogPostContentInline(BlogPost, admin.site)
        self.assertFalse(inline.can_delete)
        self.assertFalse(inline.has_add_permission(self.request, post))
        self.assertIn("content_id", inline.get_readonly_fields(self.request, post))

    def test_deleting_a_post_in_admin_cleans_up_drafts_and_content(self):
        post = self.make_post()
        draft = self.converter.create_draft_from_published(post)
        key_ids = self.markdown_keys(post) + self.markdown_keys(draft) + [post.title_translation_key_id]

        admin.site._registry[BlogPost].delete_model(self.request, post)

        self.assertFalse(BlogPost.objects.exists())
        self.assertFalse(BlogPostDraft.objects.filter(pk=draft.pk).exists())
        self.assertFalse(ContentMarkdown.objects.exists())
        self.assertFalse(TranslationKey.objects.filter(pk__in=key_ids).exists())

    def test_bulk_deleting_drafts_in_admin_keeps_published_posts(self):
        post = self.make_post()
        self.converter.create_draft_from_published(post)
        standalone = self.make_draft()
        self.blocks.create_markdown_content(standalone, self.make_key("Loose").pk)

        admin.site._registry[BlogPostDraft].delete_queryset(self.request, BlogPostDraft.objects.all())

        self.assertFalse(BlogPostDraft.objects.exists())
        self.assertEqual(ContentMarkdown.objects.count(), 1)
        self.assertEqual(self.store.get_text(self.markdown_keys(post)[0], "en"), "Original")

    def test_cascading_parent_delete_takes_entities_and_keys(self):
        post = self.make_post()
        block = post.ordered_contents().get()
        entity_id, key_id = block.content_id, block.content.translation_key_id

        post.delete()

        self.assertFalse(BlogPostContent.objects.filter(pk=block.pk).exists())
        self.assertFalse(ContentMarkdown.objects.filter(pk=entity_id).exists())
        self.assertFalse(TranslationKey.objects.filter(pk=key_id).exists())
