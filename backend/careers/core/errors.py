# backend/careers/core/errors.py
"""
Error taxonomy raised by the store (careers.crud).

Callers should import the module and use qualified names
(``errors.ReferenceError``) so the store's ReferenceError is never confused
with the builtin of the same name.
"""
from typing import Any, Optional


class StoreError(Exception):
    kind = "store_error"
    retryable = False

    def __init__(self, message: str, *, entity: Optional[str] = None, key: Any = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.key = key

    def __str__(self) -> str:
        return self.message


class ValidationError(StoreError):
    """Malformed or out-of-enumeration input."""
    kind = "validation_error"


class ReferenceError(StoreError):  # noqa: A001
    """A foreign key target does not exist."""
    kind = "reference_error"


class ConflictError(StoreError):
    """A primary key or unique constraint would be violated."""
    kind = "conflict_error"


class NotFoundError(StoreError):
    """Lookup of a single entity by key found nothing."""
    kind = "not_found"


class TransientError(StoreError):
    """Timeouts, lock waits and lost connections. Safe to retry."""
    kind = "transient_error"
    retryable = True
