from django.db.models.signals import post_delete
from django.dispatch import receiver

from apps.content.signals import discard_block_entity

from .models import BlogPostContent, BlogPostDraftContent


@receiver(post_delete, sender=BlogPostContent)
@receiver(post_delete, sender=BlogPostDraftContent)
def discard_blog_block_entity(sender, instance, **kwargs):
    """A blog block row is gone; its entity and keys go with it."""
    discard_block_entity(sender, instance, **kwargs)
