"""Typed failure conditions raised by the store.

Every public store operation either succeeds or raises one of these. Nothing
is retried; callers decide how to surface each kind.
"""


class StoreError(Exception):
    """Base exception for all store failures."""


class ValidationError(StoreError, ValueError):
    """Raised when an external payload is malformed or incomplete."""


class NotFoundError(StoreError, LookupError):
    """Raised when a requested user, post, or file does not exist."""


class ConflictError(StoreError):
    """Raised when an operation would violate an identity invariant."""


class PayloadTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured size limit."""


class StoreIOError(StoreError, OSError):
    """Raised when the underlying filesystem or index fails."""


__all__ = [
    "StoreError",
    "ValidationError",
    "PayloadTooLargeError",
    "NotFoundError",
    "ConflictError",
    "StoreIOError",
]
