"""
Custom exceptions for repository-related operations.

Every error raised by the repository layer is a `RepositoryError` (or a subclass)
tagged with an `ErrorKind`. Callers branch on the class or on `kind`, never on
the message text.
"""

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    CONFIGURATION = "configuration"
    STORE = "store"


# canonical repository-level exception

class RepositoryError(Exception):
    """
    Base exception for repository errors, and the catch-all for unclassified
    store failures.

    - message: human-friendly message, prefixed with the failing operation label
    - fields: optional list of field names related to the error (e.g., ['email'])
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code used by clients (defaults to the kind value)
    """

    kind: ErrorKind = ErrorKind.STORE

    # Map canonical error_code -> default HTTP status.
    ERROR_CODE_TO_STATUS = {
        ErrorKind.VALIDATION.value: 422,
        ErrorKind.CONFLICT.value: 409,
        ErrorKind.NOT_FOUND.value: 404,
        ErrorKind.CONFIGURATION.value: 500,
        ErrorKind.STORE.value: 500,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code or self.kind.value

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for an HTTP response body.
        Standard shape:
            {
                "detail": "Failed to find user: Resource not found",
                "code": "not_found",
                "fields": ["id"],              # only when known
            }
        The constraint name is intentionally left out of the payload.
        """
        payload = {"detail": self.message, "code": self.error_code}
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        """
        Return the HTTP status code that should accompany this error.
        Unknown codes fall back to 400 (Bad Request).
        """
        return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)


class ValidationError(RepositoryError):
    """Raised before any I/O when caller input is missing or malformed."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields)


class ConflictError(RepositoryError):
    """Unique-constraint violation, e.g. an email that already belongs to another user."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint)


class NotFoundError(RepositoryError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Not found", *, fields: Iterable[str] | None = None):
        super().__init__(message, fields=fields)


class ConfigurationError(RepositoryError):
    """A query resource (or other deployment artifact) is missing."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message)


__all__ = [
    "ErrorKind",
    "RepositoryError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "ConfigurationError",
]
