"""
In-process user repository.

Same contract and error semantics as `SqlUserRepository`, with users kept in a
dict. Useful for tests of code that depends on a `UserRepository` and for local
runs without a database. State lives only as long as the instance.
"""
import asyncio
import logging
from typing import Callable

from userstore.exceptions.base import ConflictError
from userstore.exceptions.handlers import ErrorClassifier
from userstore.models.user import CreateUserInput, UpdateUserInput, User
from userstore.utils.clock import MonotonicClock, advance_past
from userstore.validators.user_validators import UserInputValidator
from .base_repository import EMAIL_EXISTS, FIND_FAILED, UPDATE_FAILED, generate_id

logger = logging.getLogger(__name__)


class InMemoryUserRepository:

    def __init__(
        self,
        *,
        validator: UserInputValidator | None = None,
        classifier: ErrorClassifier | None = None,
        clock: Callable[[], object] | None = None,
        id_factory: Callable[[], str] = generate_id,
    ):
        self.validator = validator or UserInputValidator()
        self.classifier = classifier or ErrorClassifier()
        self.clock = clock or MonotonicClock()
        self.id_factory = id_factory
        # Insertion order == creation order, which is what find_all returns.
        self._users: dict[str, User] = {}
        # The email check and the write must not interleave with another writer.
        self._lock = asyncio.Lock()

    def _owner_of(self, email: str) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def create(self, data: CreateUserInput) -> User:
        self.validator.validate_create(data)

        async with self._lock:
            if self._owner_of(data.email) is not None:
                logger.info(
                    "repo.create.duplicate_precheck",
                    extra={"operation": "create", "conflict_fields": ["email"]},
                )
                raise ConflictError(EMAIL_EXISTS, fields=["email"])

            now = self.clock()
            user = User(
                id=self.id_factory(),
                name=data.name,
                email=data.email,
                created_at=now,
                updated_at=now,
            )
            self._users[user.id] = user

        logger.info("repo.create.success", extra={"operation": "create", "id": user.id})
        return user

    async def find_by_id(self, user_id: str) -> User:
        self.validator.validate_required(user_id, "User ID")
        user = self._users.get(user_id)
        if user is None:
            self.classifier.handle_not_found_error(FIND_FAILED)
        return user

    async def find_all(self) -> list[User]:
        return list(self._users.values())

    async def find_by_email(self, email: str) -> User | None:
        self.validator.validate_required(email, "Email")
        return self._owner_of(email)

    async def update(self, user_id: str, data: UpdateUserInput) -> User:
        self.validator.validate_required(user_id, "User ID")
        self.validator.validate_update(data)

        async with self._lock:
            current = self._users.get(user_id)
            if current is None:
                logger.warning("repo.update.not_found", extra={"operation": "update", "id": user_id})
                self.classifier.handle_not_found_error(UPDATE_FAILED)

            if data.email is not None:
                owner = self._owner_of(data.email)
                if owner is not None and owner.id != user_id:
                    raise ConflictError(EMAIL_EXISTS, fields=["email"])

            updated = current.model_copy(
                update={**data.provided_fields(), "updated_at": advance_past(self.clock(), current.updated_at)}
            )
            self._users[user_id] = updated

        logger.info("repo.update.success", extra={"operation": "update", "id": user_id})
        return updated

    async def delete(self, user_id: str) -> bool:
        self.validator.validate_required(user_id, "User ID")
        async with self._lock:
            deleted = self._users.pop(user_id, None) is not None
        if not deleted:
            logger.warning("repo.delete.not_found", extra={"operation": "delete", "id": user_id})
        return deleted

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        self._users.clear()

    def stored_users(self) -> list[User]:
        return list(self._users.values())
