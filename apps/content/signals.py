"""
Entity cleanup for block rows deleted outside ``ContentBlockService``.

Parent deletes cascade to block rows at the database level, which would
leave their entities and keys behind. The apps that own concrete block
tables connect ``discard_block_entity`` to ``post_delete`` for them.
"""

from __future__ import annotations

from apps.content.services.copier import ContentCopier


def discard_block_entity(sender, instance, **kwargs):
    ContentCopier().discard_entity(instance)
