import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

CONTENT_KIND_CHOICES = [("markdown", "Markdown"), ("gallery", "Gallery"), ("video", "Video")]
POST_TYPE_CHOICES = [("article", "Article"), ("game_review", "Game review")]
LINK_TYPE_CHOICES = [
    ("official", "Official website"),
    ("steam", "Steam"),
    ("epic", "Epic Games Store"),
    ("gog", "GOG"),
    ("playstation", "PlayStation Store"),
    ("xbox", "Xbox Store"),
    ("nintendo", "Nintendo eShop"),
    ("other", "Other"),
]


def _id():
    return ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID"))


def _timestamps():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def _block_fields(parent_model):
    return [
        _id(),
        *_timestamps(),
        ("content_type", models.CharField(choices=CONTENT_KIND_CHOICES, max_length=20)),
        ("content_id", models.PositiveBigIntegerField()),
        ("order", models.PositiveIntegerField()),
        (
            "parent",
            models.ForeignKey(
                on_delete=django.db.models.deletion.CASCADE,
                related_name="contents",
                to=parent_model,
            ),
        ),
    ]


def _review_fields(prefix):
    return [
        _id(),
        *_timestamps(),
        ("game_title", models.CharField(max_length=255)),
        ("release_date", models.DateField(blank=True, null=True)),
        ("genre", models.CharField(blank=True, default="", max_length=100)),
        ("developer", models.CharField(blank=True, default="", max_length=255)),
        ("publisher", models.CharField(blank=True, default="", max_length=255)),
        ("platforms", models.JSONField(blank=True, default=list)),
        (
            "rating",
            models.PositiveSmallIntegerField(
                blank=True, null=True, validators=[django.core.validators.MaxValueValidator(10)]
            ),
        ),
        (
            "cover_picture",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name=f"{prefix}_covers",
                to="media.picture",
            ),
        ),
        (
            "pros_translation_key",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=f"{prefix}_pros",
                to="translations.translationkey",
            ),
        ),
        (
            "cons_translation_key",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=f"{prefix}_cons",
                to="translations.translationkey",
            ),
        ),
    ]


def _link_fields(prefix):
    return [
        _id(),
        ("type", models.CharField(choices=LINK_TYPE_CHOICES, default="other", max_length=20)),
        ("url", models.URLField(max_length=500)),
        ("order", models.PositiveIntegerField(default=1)),
        (
            "label_translation_key",
            models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT,
                related_name=f"{prefix}_labels",
                to="translations.translationkey",
            ),
        ),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("media", "0001_initial"),
        ("translations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BlogCategory",
            fields=[
                _id(),
                ("name", models.CharField(max_length=100, unique=True)),
                ("slug", models.SlugField(blank=True, max_length=120, unique=True)),
                (
                    "color",
                    models.CharField(
                        choices=[
                            ("red", "Red"),
                            ("blue", "Blue"),
                            ("green", "Green"),
                            ("yellow", "Yellow"),
                            ("purple", "Purple"),
                            ("gray", "Gray"),
                        ],
                        default="gray",
                        max_length=20,
                    ),
                ),
                ("order", models.PositiveIntegerField(default=0)),
            ],
            options={"ordering": ["order", "name"], "verbose_name_plural": "Blog categories"},
        ),
        migrations.CreateModel(
            name="BlogPost",
            fields=[
                _id(),
                *_timestamps(),
                ("type", models.CharField(choices=POST_TYPE_CHOICES, default="article", max_length=20)),
                ("slug", models.SlugField(max_length=255, unique=True)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="posts",
                        to="blog.blogcategory",
                    ),
                ),
                (
                    "cover_picture",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="blogpost_covers",
                        to="media.picture",
                    ),
                ),
                (
                    "title_translation_key",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="blog_post_titles",
                        to="translations.translationkey",
                    ),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="BlogPostDraft",
            fields=[
                _id(),
                *_timestamps(),
                ("type", models.CharField(choices=POST_TYPE_CHOICES, default="article", max_length=20)),
                ("slug", models.SlugField(blank=True, default="", max_length=255)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="drafts",
                        to="blog.blogcategory",
                    ),
                ),
                (
                    "cover_picture",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="blogpostdraft_covers",
                        to="media.picture",
                    ),
                ),
                (
                    "original_blog_post",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="drafts",
                        to="blog.blogpost",
                    ),
                ),
                (
                    "title_translation_key",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="blog_post_draft_titles",
                        to="translations.translationkey",
                    ),
                ),
            ],
            options={"ordering": ["-updated_at"]},
        ),
        migrations.CreateModel(
            name="BlogPostContent",
            fields=_block_fields("blog.blogpost"),
            options={
                "ordering": ["order", "pk"],
                "abstract": False,
                "indexes": [models.Index(fields=["parent", "order"], name="blog_post_content_order_idx")],
            },
        ),
        migrations.CreateModel(
            name="BlogPostDraftContent",
            fields=_block_fields("blog.blogpostdraft"),
            options={
                "ordering": ["order", "pk"],
                "abstract": False,
                "indexes": [models.Index(fields=["parent", "order"], name="blog_draft_content_order_idx")],
            },
        ),
        migrations.CreateModel(
            name="GameReview",
            fields=[
                *_review_fields("gamereview"),
                (
                    "blog_post",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="game_review",
                        to="blog.blogpost",
                    ),
                ),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="GameReviewDraft",
            fields=[
                *_review_fields("gamereviewdraft"),
                (
                    "blog_post_draft",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="game_review_draft",
                        to="blog.blogpostdraft",
                    ),
                ),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="GameReviewLink",
            fields=[
                *_link_fields("gamereviewlink"),
                (
                    "game_review",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="links",
                        to="blog.gamereview",
                    ),
                ),
            ],
            options={"ordering": ["order", "pk"], "abstract": False},
        ),
        migrations.CreateModel(
            name="GameReviewDraftLink",
            fields=[
                *_link_fields("gamereviewdraftlink"),
                (
                    "game_review_draft",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="links",
                        to="blog.gamereviewdraft",
                    ),
                ),
            ],
            options={"ordering": ["order", "pk"], "abstract": False},
        ),
    ]
