from __future__ import annotations

import functools
from typing import Optional

from apps.site_settings.models import PublishingSettings


@functools.lru_cache(maxsize=1)
def get_settings() -> Optional[PublishingSettings]:
    """
    Small, process-local cache to avoid hitting the DB on every flag check.
    """
    try:
        return PublishingSettings.get_solo()
    except Exception:
        # Table missing during migrate; callers fall back to defaults.
        return None


def allow_empty_publish() -> bool:
    ps = get_settings()
    return bool(getattr(ps, "allow_empty_publish", False)) if ps else False


def reset_cache() -> None:
    """Used by signals/admin to clear process-local cache after updates."""
    get_settings.cache_clear()
