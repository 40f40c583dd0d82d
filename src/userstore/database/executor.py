"""
Query executor: the only component that talks to the database.

Repositories receive an executor at construction time and call
`await executor.execute(query, params)`, where `query` is either the name of a
query known to the `QuerySource` (e.g. "find_user_by_id") or raw SQL text.
Parameters are named binds (`:id`, `:email`, ...).

Store failures (SQLAlchemy `DBAPIError` and friends) propagate unchanged;
classifying them is the repository's job.
"""
import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Protocol

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.elements import TextClause

from userstore.config.settings import Settings
from userstore.utils.clock import from_store_timestamp
from .query_source import QuerySource
from .session import build_engine

logger = logging.getLogger(__name__)

_QUERY_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


@dataclass(frozen=True)
class DatabaseInfo:
    version: str
    current_time: datetime


class Executor(Protocol):
    """What repositories need from an executor."""

    async def execute(self, query: str, params: Mapping[str, Any] | None = None) -> QueryResult:
        ...


class QueryExecutor:
    """
    Executor backed by a SQLAlchemy AsyncEngine.

    Each `execute()` call checks a connection out of the engine's pool, runs the
    statement in its own short transaction, and returns the connection. No
    connection is held between calls.
    """

    def __init__(self, engine: AsyncEngine, query_source: QuerySource | None = None):
        self.engine = engine
        self.query_source = query_source or QuerySource()

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryExecutor":
        return cls(build_engine(settings), QuerySource(settings.QUERIES_DIR))

    async def __aenter__(self) -> "QueryExecutor":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Statement building
    # -------------------------------------------------------------------------

    def resolve(self, query: str) -> str:
        """
        Query name -> SQL text; anything that is not identifier-shaped is SQL already.

        A bare word is always looked up as a query name, so a one-word statement
        has to be written with its terminator (``"VACUUM;"``) to run as SQL.
        Unknown names raise ConfigurationError from the query source.
        """
        if _QUERY_NAME.match(query):
            return self.query_source.load_query(query)
        return query

    @staticmethod
    def _statement(sql: str, params: Mapping[str, Any]) -> TextClause:
        stmt = text(sql)

        # Bind datetimes with the DateTime type so every dialect stores them in
        # its native format (SQLite: ISO string, PostgreSQL: timestamp).
        typed = [
            bindparam(key, type_=DateTime())
            for key, value in params.items()
            if isinstance(value, datetime) and re.search(rf"(?<![:\w]):{re.escape(key)}\b", sql)
        ]
        if typed:
            stmt = stmt.bindparams(*typed)
        return stmt

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    async def execute(self, query: str, params: Mapping[str, Any] | None = None) -> QueryResult:
        """
        Run `query` with `params` and return its rows.

        Returns:
            QueryResult where `rows` are plain dicts keyed by column name and
            `row_count` is the number of returned rows for row-returning statements
            (SELECT, ... RETURNING) or the affected-row count otherwise.

        Raises:
            ConfigurationError: if `query` names a query file that does not exist.
            sqlalchemy.exc.DBAPIError: on any store failure.
        """
        sql = self.resolve(query)
        params = dict(params or {})
        stmt = self._statement(sql, params)

        start = time.perf_counter()
        async with self.engine.begin() as conn:
            result = await conn.execute(stmt, params)
            if result.returns_rows:
                rows = [dict(row) for row in result.mappings().all()]
                row_count = len(rows)
            else:
                rows = []
                row_count = result.rowcount

        logger.debug(
            "executor.execute",
            extra={
                "query": query if _QUERY_NAME.match(query) else "<text>",
                "row_count": row_count,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return QueryResult(rows=rows, row_count=row_count)

    async def health_check(self) -> bool:
        """True when the database answers a trivial query."""
        try:
            result = await self.execute("SELECT 1 AS health")
        except Exception:
            logger.warning("executor.health_check_failed", exc_info=True)
            return False
        return bool(result.rows) and result.rows[0]["health"] == 1

    async def database_info(self) -> DatabaseInfo:
        if self.engine.dialect.name == "sqlite":
            version_sql = "SELECT sqlite_version() AS version"
        else:
            version_sql = "SELECT version() AS version"

        version = await self.execute(version_sql)
        now = await self.execute("SELECT CURRENT_TIMESTAMP AS now")
        return DatabaseInfo(
            version=str(version.rows[0]["version"]),
            current_time=from_store_timestamp(now.rows[0]["now"]),
        )

    async def close(self) -> None:
        await self.engine.dispose()
