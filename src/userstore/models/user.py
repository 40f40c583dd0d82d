"""
Domain models for the User entity.

These are plain pydantic models, independent of how rows are stored. The table
layout lives in `userstore.database.schema`.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """
    A persisted user.

    `id` is generated at creation and never changes; `email` is unique among users;
    timestamps are timezone-aware UTC.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, name={self.name!r}, email={self.email!r})>"


class CreateUserInput(BaseModel):
    # Both fields are required, but the check happens in the validators so that
    # callers always get a ValidationError (not a pydantic error) for bad input.
    name: str | None = None
    email: str | None = None


class UpdateUserInput(BaseModel):
    """
    Partial update. `None` means "leave unchanged"; an empty string is a value
    and will be rejected by validation.
    """

    name: str | None = None
    email: str | None = None

    def provided_fields(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)
