from django.contrib import admin
from solo.admin import SingletonModelAdmin

from .models import PublishingSettings


@admin.register(PublishingSettings)
class PublishingSettingsAdmin(SingletonModelAdmin):
    fieldsets = (("Publishing", {"fields": ("allow_empty_publish",)}),)
