"""
apps.core.exceptions
====================

Error taxonomy for the content pipeline and its unified HTTP mapping.

✓ Django 5.2 / Python 3.12+
✓ Domain errors subclass the matching Django exceptions
✓ Hardened against info disclosure (DEBUG-only details)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.http import JsonResponse
from django.utils.translation import gettext_lazy as _

log = logging.getLogger(__name__)


# ============================================================
#  Taxonomy
# ============================================================
class ContentError(Exception):
    """Base class for every error raised by the content pipeline."""


class NotFound(ContentError, ObjectDoesNotExist):
    """A referenced block, entity, picture, video, key or parent is missing."""

    def __init__(self, kind: str, identifier: Any):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier!r} not found")


class ValidationFailure(ContentError, ValidationError):
    """
    Malformed input. Accepts anything ``ValidationError`` accepts; a dict
    gives per-field messages through ``message_dict``.
    """


class EmptyContentFailure(ValidationFailure):
    """Publishing a draft that has no content blocks."""


class TransactionFailure(ContentError):
    """The storage layer aborted; all partial writes were rolled back."""

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


# ============================================================
#  Status mapping
# ============================================================
def status_for(exc: BaseException) -> int:
    """HTTP-style status code for an exception raised by the pipeline."""
    if isinstance(exc, EmptyContentFailure):
        return 422
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, ObjectDoesNotExist):
        return 404
    return 500


class EnterpriseExceptionHandler:
    """
    Centralized handler turning pipeline errors into JSON responses for
    whichever view layer exposes the services.
    """

    @staticmethod
    def handle_api_exception(
        exc: Exception,
        context: Optional[dict[str, Any]] = None,
    ) -> JsonResponse:
        status_code = status_for(exc)
        response_data: dict[str, Any]

        # ------------------------------------------
        # Empty draft
        # ------------------------------------------
        if isinstance(exc, EmptyContentFailure):
            response_data = {
                "ok": False,
                "error": "empty_content",
                "message": _("A draft needs at least one content block to be published."),
            }

        # ------------------------------------------
        # Validation
        # ------------------------------------------
        elif isinstance(exc, ValidationError):
            details = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
            response_data = {
                "ok": False,
                "error": "validation_failed",
                "details": details,
            }

        # ------------------------------------------
        # Missing objects
        # ------------------------------------------
        elif isinstance(exc, ObjectDoesNotExist):
            response_data = {
                "ok": False,
                "error": "not_found",
                "message": str(exc) if settings.DEBUG else _("Requested resource was not found."),
            }

        # ------------------------------------------
        # Storage failure / unhandled error (safe fallback)
        # ------------------------------------------
        else:
            if not isinstance(exc, TransactionFailure):
                log.exception("Unhandled exception occurred", exc_info=exc)
            response_data = {
                "ok": False,
                "error": "transaction_failed" if isinstance(exc, TransactionFailure) else "internal_error",
                "message": (
                    f"{exc.__class__.__name__}: {exc}"
                    if settings.DEBUG
                    else _("An unexpected error occurred.")
                ),
            }

        return JsonResponse(
            response_data,
            status=status_code,
            json_dumps_params={
                "ensure_ascii": False,
                "indent": 2 if settings.DEBUG else None,
            },
        )
