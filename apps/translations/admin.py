from django.contrib import admin

from .models import Translation, TranslationKey


class TranslationInline(admin.TabularInline):
    model = Translation
    extra = 0


@admin.register(TranslationKey)
class TranslationKeyAdmin(admin.ModelAdmin):
    list_display = ("key", "created_at", "updated_at")
    search_fields = ("key", "translations__text")
    inlines = [TranslationInline]
