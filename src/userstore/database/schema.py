from datetime import datetime

from sqlalchemy import DateTime, String, text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class UserRecord(Base):
    """
    Table layout of `users`:

        users(id TEXT PRIMARY KEY, name TEXT NOT NULL, email TEXT NOT NULL UNIQUE,
              created_at TIMESTAMP, updated_at TIMESTAMP)

    Timestamps are stored as naive UTC.
    """
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # The UNIQUE constraint is the authoritative duplicate-email guard.
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<UserRecord(id={self.id!r}, email={self.email!r})>"


async def create_tables(engine: AsyncEngine) -> None:
    """Create the `users` table if it does not exist (no migrations)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def clear_tables(engine: AsyncEngine) -> None:
    """Delete every row (useful between tests)."""
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())
