import django.db.models.deletion
from django.db import migrations, models

TECHNOLOGY_TYPE_CHOICES = [
    ("framework", "Framework"),
    ("library", "Library"),
    ("language", "Language"),
    ("other", "Other"),
]


def _id():
    return ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID"))


def _timestamps():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


def _key(related_name, null=False):
    return models.ForeignKey(
        blank=null,
        null=null,
        on_delete=django.db.models.deletion.PROTECT,
        related_name=related_name,
        to="translations.translationkey",
    )


def _feature_fields(prefix, owner_field, owner_model):
    return [
        _id(),
        *_timestamps(),
        ("title_translation_key", _key(f"{prefix}_titles")),
        ("description_translation_key", _key(f"{prefix}_descriptions", null=True)),
        (
            "picture",
            models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name=f"{prefix}_set",
                to="media.picture",
            ),
        ),
        (
            owner_field,
            models.ForeignKey(
                on_delete=django.db.models.deletion.CASCADE,
                related_name="features",
                to=owner_model,
            ),
        ),
    ]


def _screenshot_fields(prefix, owner_field, owner_model):
    return [
        _id(),
        *_timestamps(),
        ("order", models.PositiveIntegerField(default=1)),
        (
            "picture",
            models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT,
                related_name=f"{prefix}_set",
                to="media.picture",
            ),
        ),
        ("caption_translation_key", _key(f"{prefix}_captions", null=True)),
        (
            owner_field,
            models.ForeignKey(
                on_delete=django.db.models.deletion.CASCADE,
                related_name="screenshots",
                to=owner_model,
            ),
        ),
    ]


class Migration(migrations.Migration):

    dependencies = [
        ("creations", "0001_initial"),
        ("media", "0001_initial"),
        ("translations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Technology",
            fields=[
                _id(),
                ("name", models.CharField(max_length=100, unique=True)),
                ("type", models.CharField(choices=TECHNOLOGY_TYPE_CHOICES, default="other", max_length=20)),
                ("svg_icon", models.TextField(blank=True, default="")),
                ("description_translation_key", _key("technology_descriptions", null=True)),
            ],
            options={"ordering": ["name"], "verbose_name_plural": "Technologies"},
        ),
        migrations.AddField(
            model_name="creation",
            name="technologies",
            field=models.ManyToManyField(blank=True, related_name="creations", to="creations.technology"),
        ),
        migrations.AddField(
            model_name="creationdraft",
            name="technologies",
            field=models.ManyToManyField(blank=True, related_name="creationdrafts", to="creations.technology"),
        ),
        migrations.AddField(
            model_name="creation",
            name="videos",
            field=models.ManyToManyField(blank=True, related_name="creations", to="media.video"),
        ),
        migrations.AddField(
            model_name="creationdraft",
            name="videos",
            field=models.ManyToManyField(blank=True, related_name="creationdrafts", to="media.video"),
        ),
        migrations.CreateModel(
            name="Feature",
            fields=_feature_fields("feature", "creation", "creations.creation"),
            options={"ordering": ["pk"], "abstract": False},
        ),
        migrations.CreateModel(
            name="FeatureDraft",
            fields=_feature_fields("featuredraft", "creation_draft", "creations.creationdraft"),
            options={"ordering": ["pk"], "abstract": False},
        ),
        migrations.CreateModel(
            name="Screenshot",
            fields=_screenshot_fields("screenshot", "creation", "creations.creation"),
            options={"ordering": ["order", "pk"], "abstract": False},
        ),
        migrations.CreateModel(
            name="ScreenshotDraft",
            fields=_screenshot_fields("screenshotdraft", "creation_draft", "creations.creationdraft"),
            options={"ordering": ["order", "pk"], "abstract": False},
        ),
    ]
