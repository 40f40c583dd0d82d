"""
Error classifier: turn any failure raised while talking to the store into one of
the repository exceptions defined in `exceptions.base`.

Usage:
    try:
        result = await executor.execute("find_user_by_id", {"id": user_id})
    except Exception as exc:
        handle_db_error("Failed to find user", exc)

or, equivalently:
    async with db_error_handler("Failed to find user"):
        result = await executor.execute("find_user_by_id", {"id": user_id})
"""
import logging
from contextlib import asynccontextmanager
from typing import Callable, NoReturn

from sqlalchemy.exc import DBAPIError, IntegrityError

from .base import ConflictError, NotFoundError, RepositoryError
from .integrity_classifier import (
    UniqueConstraintError,
    classify_integrity_error,
    extract_columns_from_integrity,
)

logger = logging.getLogger(__name__)

# A custom handler inspects the raw error and may return a replacement exception.
CustomHandler = Callable[[BaseException], BaseException | None]


def _error_message(error: BaseException) -> str:
    # DBAPIError.__str__ includes the SQL statement and parameters; prefer the driver message.
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


def handle_db_error(operation: str, error: BaseException,
                    custom_handler: CustomHandler | None = None) -> NoReturn:
    """
    Re-raise `error` as a classified repository exception. Never returns.

    Args:
        operation: label of the failing operation, e.g. "Failed to create user"
        error: the caught exception
        custom_handler: optional callable that may return a replacement exception

    Raises:
        The error itself if it is already a RepositoryError,
        the custom handler's replacement if it returned one,
        otherwise RepositoryError("<operation>: <original message>").
    """
    if isinstance(error, RepositoryError):
        raise error

    if custom_handler is not None:
        replacement = custom_handler(error)
        if replacement is not None:
            raise replacement from error

    message = _error_message(error)
    logger.error(
        "repo.store_failure",
        extra={"operation": operation, "error_type": type(error).__name__},
    )
    raise RepositoryError(f"{operation}: {message}") from error


def handle_not_found_error(operation: str, error: BaseException | None = None) -> NoReturn:
    """
    Always classify as not found, whatever the underlying cause.
    """
    logger.info("repo.not_found", extra={"operation": operation})
    if error is not None:
        raise NotFoundError(f"{operation}: Resource not found") from error
    raise NotFoundError(f"{operation}: Resource not found")


def integrity_conflict_handler(error: BaseException) -> BaseException | None:
    """
    Custom handler mapping a store-level unique violation to ConflictError.

    The only unique column besides the primary key is `email`, so any unique
    violation on insert/update is reported as a duplicate email.
    """
    if not isinstance(error, IntegrityError):
        return None

    label, constraint_name = classify_integrity_error(error)
    if label is not UniqueConstraintError:
        return None

    columns = extract_columns_from_integrity(error)
    logger.info(
        "mapper.duplicate_detected",
        extra={"fields": columns, "constraint": constraint_name},
    )
    return ConflictError("Email already exists", fields=["email"], constraint=constraint_name)


class ErrorClassifier:
    """
    Injectable error classification capability.

    Repositories hold one of these and call it on every failure path; swapping it
    (for example in tests) changes how raw store errors are classified without
    touching the repository.
    """

    def __init__(self, custom_handler: CustomHandler | None = integrity_conflict_handler):
        self.custom_handler = custom_handler

    def handle_db_error(self, operation: str, error: BaseException,
                        custom_handler: CustomHandler | None = None) -> NoReturn:
        handle_db_error(operation, error, custom_handler or self.custom_handler)

    def handle_not_found_error(self, operation: str, error: BaseException | None = None) -> NoReturn:
        handle_not_found_error(operation, error)


@asynccontextmanager
async def db_error_handler(operation: str, classifier: ErrorClassifier | None = None):
    """
    Usage:
        async with db_error_handler("Failed to delete user", self.classifier):
            ... executor calls ...
    Any exception leaving the block is re-raised as a classified repository error.
    """
    classifier = classifier or ErrorClassifier()
    try:
        yield
    except Exception as exc:
        classifier.handle_db_error(operation, exc)
