from apps.content.services.blocks import ContentBlockService
from apps.content.services.conversion import DraftPublishConverter
from apps.content.services.copier import ContentCopier

__all__ = ["ContentBlockService", "ContentCopier", "DraftPublishConverter"]
