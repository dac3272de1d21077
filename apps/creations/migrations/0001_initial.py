import django.db.models.deletion
from django.db import migrations, models

CONTENT_KIND_CHOICES = [("markdown", "Markdown"), ("gallery", "Gallery"), ("video", "Video")]
CREATION_TYPE_CHOICES = [
    ("portfolio", "Portfolio"),
    ("game", "Game"),
    ("library", "Library"),
    ("website", "Website"),
    ("tool", "Tool"),
    ("map", "Map"),
    ("other", "Other"),
]


def _id():
    return ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID"))


def _timestamps():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def _creation_fields(prefix):
    return [
        _id(),
        *_timestamps(),
        ("name", models.CharField(blank=True, default="", max_length=255)),
        ("type", models.CharField(choices=CREATION_TYPE_CHOICES, default="other", max_length=20)),
        ("ended_at", models.DateField(blank=True, null=True)),
        ("external_url", models.URLField(blank=True, default="", max_length=500)),
        ("source_code_url", models.URLField(blank=True, default="", max_length=500)),
        ("featured", models.BooleanField(default=False)),
        (
            "logo",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name=f"{prefix}_logos",
                to="media.picture",
            ),
        ),
        (
            "cover_image",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name=f"{prefix}_covers",
                to="media.picture",
            ),
        ),
        (
            "full_description_translation_key",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name=f"{prefix}_full_descriptions",
                to="translations.translationkey",
            ),
        ),
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


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("media", "0001_initial"),
        ("translations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Creation",
            fields=[
                *_creation_fields("creation"),
                ("slug", models.SlugField(max_length=255, unique=True)),
                ("started_at", models.DateField()),
                (
                    "short_description_translation_key",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="creation_short_descriptions",
                        to="translations.translationkey",
                    ),
                ),
            ],
            options={"ordering": ["-featured", "-started_at"]},
        ),
        migrations.CreateModel(
            name="CreationDraft",
            fields=[
                *_creation_fields("creationdraft"),
                ("slug", models.SlugField(blank=True, default="", max_length=255)),
                ("started_at", models.DateField(blank=True, null=True)),
                (
                    "short_description_translation_key",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="creation_draft_short_descriptions",
                        to="translations.translationkey",
                    ),
                ),
                (
                    "original_creation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="drafts",
                        to="creations.creation",
                    ),
                ),
            ],
            options={"ordering": ["-updated_at"]},
        ),
        migrations.CreateModel(
            name="CreationContent",
            fields=_block_fields("creations.creation"),
            options={
                "ordering": ["order", "pk"],
                "abstract": False,
                "indexes": [models.Index(fields=["parent", "order"], name="creation_content_order_idx")],
            },
        ),
        migrations.CreateModel(
            name="CreationDraftContent",
            fields=_block_fields("creations.creationdraft"),
            options={
                "ordering": ["order", "pk"],
                "abstract": False,
                "indexes": [models.Index(fields=["parent", "order"], name="creation_draft_order_idx")],
            },
        ),
    ]
