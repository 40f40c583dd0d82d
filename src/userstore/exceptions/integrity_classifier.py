r"""
Classify low-level integrity failures reported by the store.

The classes defined here are internal labels: they describe *what* failed in the
database (unique index, NOT NULL column, ...). They are never raised to callers.
`exceptions.handlers` turns them into the public taxonomy
(`ConflictError`, `RepositoryError`).

| Constraint-level (internal) | → | App-level (external)            |
| --------------------------- | - | ------------------------------- |
| `UniqueConstraintError`     | → | `ConflictError`                 |
| `NotNullConstraintError`    | → | `RepositoryError` (generic)     |
| `ForeignKeyConstraintError` | → | `RepositoryError` (generic)     |
| `CheckConstraintError`      | → | `RepositoryError` (generic)     |
"""
import logging
import re
from enum import Enum
from typing import Type

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

# =================================================================================================================
# Constraint-specific labels
# =================================================================================================================


class ConstraintViolation:
    """Base label for integrity/constraint violations."""


class UniqueConstraintError(ConstraintViolation):
    """Unique constraint / duplicate value."""


class NotNullConstraintError(ConstraintViolation):
    """NOT NULL violation (missing required field)."""


class ForeignKeyConstraintError(ConstraintViolation):
    pass


class CheckConstraintError(ConstraintViolation):
    pass


class UnknownIntegrityError(ConstraintViolation):
    """Unrecognized integrity error."""


# =================================================================================================================
# Postgres error code mapping
# =================================================================================================================

# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_EXCEPTION_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION.value: UniqueConstraintError,
    PostgresErrorCodes.NOT_NULL_VIOLATION.value: NotNullConstraintError,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION.value: ForeignKeyConstraintError,
    PostgresErrorCodes.CHECK_VIOLATION.value: CheckConstraintError,
}


# =================================================================================================================
# Classifiers
# =================================================================================================================

def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _pgcode_of(orig) -> str | None:
    # psycopg exposes `sqlstate`, psycopg2 and the SQLAlchemy asyncpg adapter expose `pgcode`
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _classify_from_postgres_diag(orig) -> tuple[Type[ConstraintViolation] | None, str | None]:
    pgcode = _pgcode_of(orig)
    if not pgcode:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None

    label = PGCODE_EXCEPTION_MAP.get(pgcode)
    if label:
        logger.debug(
            "Postgres integrity diagnostic",
            extra={"pgcode": pgcode, "constraint_name": constraint_name},
        )
        return label, constraint_name

    logger.warning(
        "Unknown Postgres integrity error code encountered",
        extra={"pgcode": pgcode, "constraint_name": constraint_name},
    )
    return UnknownIntegrityError, constraint_name


def _classify_from_generic_message(msg: str) -> tuple[Type[ConstraintViolation], None]:
    """
    Classify integrity error based on message content (SQLite, MySQL, ...).
    """
    normalized = msg.lower()

    if _match_any(normalized, ["unique constraint", "unique failed", "unique violation", "duplicate"]):
        return UniqueConstraintError, None

    if _match_any(normalized, ["not null constraint", "not null", "null value in column"]):
        return NotNullConstraintError, None

    if _match_any(normalized, ["foreign key constraint", "foreign key", "is not present in table"]):
        return ForeignKeyConstraintError, None

    if _match_any(normalized, ["check constraint", "check failed"]):
        return CheckConstraintError, None

    logger.warning("Unknown integrity error message encountered", extra={"message_snippet": (msg or "")[:200]})
    return UnknownIntegrityError, None


def classify_integrity_error(exc: IntegrityError) -> tuple[Type[ConstraintViolation], str | None]:
    """
    Heuristically classify a SQLAlchemy IntegrityError.

    Returns:
        A tuple of (label class, constraint name if the driver reported one)
    """
    orig = exc.orig

    label, constraint_name = _classify_from_postgres_diag(orig)
    if label is not None:
        return label, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc))


def extract_columns_from_integrity(exc: IntegrityError) -> list[str] | None:
    """
    Best-effort extraction of the column names involved in the violation.
      - Postgres: 'DETAIL:  Key (email)=(a@b.com) already exists.'
      - SQLite:   'UNIQUE constraint failed: users.email'
    """
    msg = str(exc.orig) if exc.orig is not None else str(exc)

    m = re.search(r'key \((?P<cols>[^)]+)\)=', msg, flags=re.IGNORECASE)
    if m:
        return [c.strip().strip('"') for c in m.group("cols").split(",")]

    m = re.search(r'constraint failed: (?P<cols>.+)$', msg, flags=re.IGNORECASE | re.MULTILINE)
    if m:
        return [c.split('.')[-1].strip() for c in re.split(r',\s*', m.group("cols"))]

    return None
