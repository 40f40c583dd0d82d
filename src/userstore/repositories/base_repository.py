"""
The contract every user repository variant implements.

Unlike the usual base-class approach, `UserRepository` is a Protocol: variants
(`SqlUserRepository`, `InMemoryUserRepository`) do not inherit behavior from it.
Shared behavior is composed instead, each variant holding:

    - a validator   (`UserInputValidator`)
    - a row mapper  (`map_row_to_user`, store-backed variant only)
    - a classifier  (`ErrorClassifier`)
    - a clock and an id factory

Not-found semantics are the same for every variant:

| Operation        | Nothing matches                 |
| ---------------- | ------------------------------- |
| `find_by_id`     | raises `NotFoundError`          |
| `update`         | raises `NotFoundError`          |
| `delete`         | returns `False`                 |
| `find_by_email`  | returns `None`                  |
| `find_all`       | returns `[]`                    |
"""
import uuid
from typing import Protocol, runtime_checkable

from userstore.models.user import CreateUserInput, UpdateUserInput, User


def generate_id() -> str:
    return str(uuid.uuid4())


@runtime_checkable
class UserRepository(Protocol):

    async def create(self, data: CreateUserInput) -> User:
        ...

    async def find_by_id(self, user_id: str) -> User:
        ...

    async def find_all(self) -> list[User]:
        ...

    async def update(self, user_id: str, data: UpdateUserInput) -> User:
        ...

    async def delete(self, user_id: str) -> bool:
        ...

    async def find_by_email(self, email: str) -> User | None:
        ...


# Operation labels used as prefixes in error messages.
CREATE_FAILED = "Failed to create user"
FIND_FAILED = "Failed to find user"
FIND_ALL_FAILED = "Failed to retrieve users"
FIND_BY_EMAIL_FAILED = "Failed to find user by email"
UPDATE_FAILED = "Failed to update user"
DELETE_FAILED = "Failed to delete user"

EMAIL_EXISTS = "Email already exists"
