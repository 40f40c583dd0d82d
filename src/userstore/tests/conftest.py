"""
Core pytest configuration for the entire test suite.

Provides the database setup shared by every store-backed test. Domain-specific
fixtures (repositories, sample data) live in tests/test_fixtures/ and are
imported at the bottom of this module so they are available everywhere.

Database selection, in order:
  1. `TEST_DATABASE_URL` environment variable (CI override, e.g. a PostgreSQL URL)
  2. the settings' DATABASE_URL when `TESTING=true` and `TEST_POSTGRES_DB` is set
  3. a throwaway SQLite file per test (no server needed)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import AsyncGenerator
from urllib.parse import urlparse

# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from userstore.config import get_settings
from userstore.core.logging.builder import setup_logging
from userstore.database import QueryExecutor, clear_tables, create_tables, drop_tables

settings = get_settings()
logger = logging.getLogger(__name__)


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application logging configuration once for the session.
    Always log to stdout here: tests must not write into LOG_DIR.
    """
    setup_logging(settings.model_copy(update={"LOG_TO_STDOUT": True}))
    yield


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------


def safe_log_db_url(db_url: str) -> str:
    """Database URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url(tmp_dir: Path) -> str:
    if test_url := os.getenv("TEST_DATABASE_URL"):
        return test_url

    if settings.TESTING and settings.TEST_POSTGRES_DB:
        return settings.DATABASE_URL

    return f"sqlite+aiosqlite:///{tmp_dir / 'test_userstore.db'}"


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine with an empty `users` table, dropped again after the test.
    """
    url = get_test_database_url(tmp_path)
    logger.debug("Using test DB: %s", safe_log_db_url(url))

    engine = create_async_engine(url, echo=False, pool_pre_ping=True)
    await create_tables(engine)
    # a shared server database may still hold rows from an aborted run
    await clear_tables(engine)

    yield engine

    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture()
async def executor(async_engine: AsyncEngine) -> QueryExecutor:
    # The engine fixture owns disposal; the executor is not closed here.
    return QueryExecutor(async_engine)


# Repository test fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    create_user,
    created_user,
    memory_repository,
    multiple_users,
    repository,
    sample_user_data,
    sql_repository,
)
