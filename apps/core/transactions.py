"""
apps.core.transactions
======================

Single entry point for multi-row writes in the content pipeline.

Every operation that touches more than one row runs inside
``transactional()``. Nested use creates a savepoint, so a failing inner
step rolls back only its own work when the caller chooses to recover.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from django.db import DatabaseError, transaction

from apps.core.exceptions import TransactionFailure

logger = logging.getLogger(__name__)


@contextmanager
def transactional(operation: str, using: Optional[str] = None) -> Iterator[None]:
    """
    Run the enclosed block atomically.

    Domain errors (NotFound, ValidationFailure, ...) propagate unchanged
    after the rollback. Database errors are wrapped in TransactionFailure
    with the original chained.
    """
    try:
        with transaction.atomic(using=using):
            yield
    except DatabaseError as exc:
        logger.exception("Transaction '%s' rolled back", operation)
        raise TransactionFailure(operation, exc) from exc
