from django.db.models.signals import post_delete
from django.dispatch import receiver

from apps.content.signals import discard_block_entity

from .models import CreationContent, CreationDraftContent


@receiver(post_delete, sender=CreationContent)
@receiver(post_delete, sender=CreationDraftContent)
def discard_creation_block_entity(sender, instance, **kwargs):
    discard_block_entity(sender, instance, **kwargs)
