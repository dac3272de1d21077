from __future__ import annotations

import logging
from typing import Any

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def log_event(logger: logging.Logger, level: str, message: str, **extra: Any) -> None:
    """
    Structured logging helper. Attaches the keyword arguments as an
    'event' payload via `extra`; a misconfigured handler never raises
    into the caller.
    """
    try:
        logger.log(_LEVELS.get(level, logging.INFO), message, extra={"event": extra})
    except Exception:
        # Never let logging break a publish
        return
