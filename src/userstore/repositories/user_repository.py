"""
Store-backed user repository.

Each operation follows the same pipeline:

    validate -> (existence read, uniqueness pre-check) -> executor call -> map rows -> classify failures

Queries are referenced by name (see `userstore/database/queries/*.sql`) and run
through the injected executor; the repository never opens connections itself.
"""

import logging
import time
from typing import Any, Callable, Mapping

from userstore.database.executor import Executor
from userstore.exceptions.base import ConflictError
from userstore.exceptions.handlers import ErrorClassifier, db_error_handler
from userstore.models.user import CreateUserInput, UpdateUserInput, User
from userstore.utils.clock import MonotonicClock, advance_past, to_store_timestamp
from userstore.validators.user_validators import UserInputValidator
from .base_repository import (
    CREATE_FAILED,
    DELETE_FAILED,
    EMAIL_EXISTS,
    FIND_ALL_FAILED,
    FIND_BY_EMAIL_FAILED,
    FIND_FAILED,
    UPDATE_FAILED,
    generate_id,
)
from .row_mapper import map_row_to_user

logger = logging.getLogger(__name__)


class SqlUserRepository:
    """
    Repository for User entity operations over a relational store.

    The uniqueness pre-check in `create`/`update` is a fast path only: two
    concurrent calls with the same email can both pass it. The UNIQUE constraint
    on `users.email` then rejects one of them, and the classifier reports that
    as ConflictError too.
    """

    def __init__(
        self,
        executor: Executor,
        *,
        validator: UserInputValidator | None = None,
        row_mapper: Callable[[Mapping[str, Any]], User] = map_row_to_user,
        classifier: ErrorClassifier | None = None,
        clock: Callable[[], Any] | None = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        """
        Args:
            executor: runs named queries against the store (owned by the caller)
            validator: input validation capability
            row_mapper: converts a raw row into a User
            classifier: turns raw failures into repository exceptions
            clock: returns the current aware UTC datetime; must not repeat values
            id_factory: returns a fresh unique id
        """
        self.executor = executor
        self.validator = validator or UserInputValidator()
        self.row_mapper = row_mapper
        self.classifier = classifier or ErrorClassifier()
        self.clock = clock or MonotonicClock()
        self.id_factory = id_factory

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def create(self, data: CreateUserInput) -> User:
        """
        Create a new user.

        Raises:
            ValidationError: blank name/email or malformed email (before any I/O)
            ConflictError: the email already belongs to a user
            RepositoryError: any other store failure
        """
        logger.debug(
            "repo.create.start",
            extra={"operation": "create", "provided_keys": sorted(data.model_dump(exclude_none=True))},
        )

        self.validator.validate_create(data)

        if await self.find_by_email(data.email) is not None:
            logger.info(
                "repo.create.duplicate_precheck",
                extra={"operation": "create", "conflict_fields": ["email"]},
            )
            raise ConflictError(EMAIL_EXISTS, fields=["email"])

        now = to_store_timestamp(self.clock())
        params = {
            "id": self.id_factory(),
            "name": data.name,
            "email": data.email,
            "created_at": now,
            "updated_at": now,
        }

        start = time.perf_counter()
        async with db_error_handler(CREATE_FAILED, self.classifier):
            result = await self.executor.execute("create_user", params)

        user = self.row_mapper(result.rows[0])
        logger.info(
            "repo.create.success",
            extra={
                "operation": "create",
                "id": user.id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return user

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def find_by_id(self, user_id: str) -> User:
        """
        Get a user by id.

        Raises:
            ValidationError: empty id
            NotFoundError: no user has this id
            RepositoryError: store failure
        """
        self.validator.validate_required(user_id, "User ID")

        async with db_error_handler(FIND_FAILED, self.classifier):
            result = await self.executor.execute("find_user_by_id", {"id": user_id})

        if not result.rows:
            logger.debug("repo.find_by_id.miss", extra={"operation": "find_by_id", "id": user_id})
            self.classifier.handle_not_found_error(FIND_FAILED)

        return self.row_mapper(result.rows[0])

    async def find_all(self) -> list[User]:
        """
        All users, oldest first. An empty store gives an empty list.
        """
        async with db_error_handler(FIND_ALL_FAILED, self.classifier):
            result = await self.executor.execute("find_all_users")

        users = [self.row_mapper(row) for row in result.rows]
        logger.debug("repo.find_all.success", extra={"operation": "find_all", "count": len(users)})
        return users

    async def find_by_email(self, email: str) -> User | None:
        """
        Get a user by email, or None when nobody uses it.

        Also used by `create`/`update` for the uniqueness pre-check, so a miss is
        a normal outcome rather than an error.
        """
        self.validator.validate_required(email, "Email")

        async with db_error_handler(FIND_BY_EMAIL_FAILED, self.classifier):
            result = await self.executor.execute("find_user_by_email", {"email": email})

        if not result.rows:
            return None
        return self.row_mapper(result.rows[0])

    # =================================================================================================================
    # Update
    # =================================================================================================================

    async def update(self, user_id: str, data: UpdateUserInput) -> User:
        """
        Apply a partial update. Fields left as None keep their stored value;
        `updated_at` is always refreshed and always lands after the stored value,
        whichever clock wrote that value.

        Raises:
            ValidationError: empty id, or a provided field is blank/malformed
            ConflictError: the new email belongs to another user
            NotFoundError: no user has this id
            RepositoryError: store failure
        """
        self.validator.validate_required(user_id, "User ID")
        self.validator.validate_update(data)

        logger.debug(
            "repo.update.start",
            extra={"operation": "update", "id": user_id, "provided_keys": sorted(data.provided_fields())},
        )

        # Existence is checked before email ownership: an unknown id is NotFound
        # even when the email belongs to someone else.
        async with db_error_handler(UPDATE_FAILED, self.classifier):
            current = await self.executor.execute("find_user_by_id", {"id": user_id})

        if not current.rows:
            logger.warning("repo.update.not_found", extra={"operation": "update", "id": user_id})
            self.classifier.handle_not_found_error(UPDATE_FAILED)

        if data.email is not None:
            owner = await self.find_by_email(data.email)
            if owner is not None and owner.id != user_id:
                logger.info(
                    "repo.update.duplicate_precheck",
                    extra={"operation": "update", "id": user_id, "conflict_fields": ["email"]},
                )
                raise ConflictError(EMAIL_EXISTS, fields=["email"])

        stored = self.row_mapper(current.rows[0])
        updated_at = advance_past(self.clock(), stored.updated_at)

        # None values pass through COALESCE in update_user.sql and keep the stored value.
        params = {
            "id": user_id,
            "name": data.name,
            "email": data.email,
            "updated_at": to_store_timestamp(updated_at),
        }

        async with db_error_handler(UPDATE_FAILED, self.classifier):
            result = await self.executor.execute("update_user", params)

        # deleted between the read above and this write
        if result.row_count == 0:
            logger.warning("repo.update.not_found", extra={"operation": "update", "id": user_id})
            self.classifier.handle_not_found_error(UPDATE_FAILED)

        user = self.row_mapper(result.rows[0])
        logger.info("repo.update.success", extra={"operation": "update", "id": user.id})
        return user

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete(self, user_id: str) -> bool:
        """
        Delete a user by id.

        Returns:
            True if a row was deleted, False if no user had this id
        """
        self.validator.validate_required(user_id, "User ID")

        async with db_error_handler(DELETE_FAILED, self.classifier):
            result = await self.executor.execute("delete_user", {"id": user_id})

        deleted = result.row_count > 0
        if deleted:
            logger.info("repo.delete.success", extra={"operation": "delete", "id": user_id})
        else:
            logger.warning("repo.delete.not_found", extra={"operation": "delete", "id": user_id})
        return deleted
