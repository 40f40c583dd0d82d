import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from userstore.exceptions import ConflictError
from userstore.models.user import CreateUserInput, UpdateUserInput
from userstore.repositories import InMemoryUserRepository
from userstore.validators import UserInputValidator


@pytest.mark.asyncio
class TestInMemoryUserRepository:

    async def test_injected_clock_and_id_factory(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        ticks = iter(start + timedelta(seconds=i) for i in range(10))
        ids = iter(["first", "second"])
        repo = InMemoryUserRepository(clock=lambda: next(ticks), id_factory=lambda: next(ids))

        user = await repo.create(CreateUserInput(name="Ann", email="ann@example.com"))
        updated = await repo.update(user.id, UpdateUserInput(name="Anna"))

        assert user.id == "first"
        assert user.created_at == start
        assert updated.updated_at == start + timedelta(seconds=1)

    async def test_concurrent_duplicate_creates(self, memory_repository):
        results = await asyncio.gather(
            *(memory_repository.create(CreateUserInput(name=f"U{i}", email="same@example.com")) for i in range(5)),
            return_exceptions=True,
        )

        assert sum(not isinstance(r, Exception) for r in results) == 1
        assert sum(isinstance(r, ConflictError) for r in results) == 4
        assert len(memory_repository.stored_users()) == 1

    async def test_clear(self, memory_repository):
        await memory_repository.create(CreateUserInput(name="Ann", email="ann@example.com"))

        memory_repository.clear()

        assert await memory_repository.find_all() == []

    async def test_returned_users_are_immutable(self, memory_repository):
        user = await memory_repository.create(CreateUserInput(name="Ann", email="ann@example.com"))

        with pytest.raises(PydanticValidationError):
            user.name = "Mallory"

        assert (await memory_repository.find_by_id(user.id)).name == "Ann"

    async def test_instances_do_not_share_state(self):
        first = InMemoryUserRepository()
        second = InMemoryUserRepository()

        await first.create(CreateUserInput(name="Ann", email="ann@example.com"))

        assert await second.find_all() == []

    async def test_permissive_email_validator_is_honored(self):
        repo = InMemoryUserRepository(validator=UserInputValidator(email_validator=lambda e: True))

        user = await repo.create(CreateUserInput(name="A", email="localonly"))

        assert user.email == "localonly"
