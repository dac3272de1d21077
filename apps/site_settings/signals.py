from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import PublishingSettings
from apps.core.utils import feature_flags


@receiver(post_save, sender=PublishingSettings)
@receiver(post_delete, sender=PublishingSettings)
def invalidate_publishing_settings_cache(sender, **kwargs):
    """
    Signal handler to clear cached publishing flags whenever the row changes.
    """
    feature_flags.reset_cache()
