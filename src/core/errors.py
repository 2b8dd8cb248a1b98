"""
Core error classes for the catalog dashboard.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for every failure the catalog layer reports to callers."""

    code = "catalog_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(CatalogError):
    """Raised when a document or record is absent."""

    code = "not_found"


class DecodeError(CatalogError):
    """Raised when a document payload is not valid base64, UTF-8 or JSON."""

    code = "decode_error"


class ValidationError(CatalogError):
    """Raised when a caller-supplied record violates a catalog invariant."""

    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message, details={"field": field})


class ConflictError(CatalogError):
    """Raised when an operation would break a relational invariant."""

    code = "conflict"


class NoOpError(CatalogError):
    """Raised when an operation requests no actual change."""

    code = "no_op"


class ChangeSubmissionError(CatalogError):
    """Raised when GitHub rejects an issue or dispatch change request."""

    code = "change_submission_failed"
