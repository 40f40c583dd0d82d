from .base import Base
from .executor import DatabaseInfo, Executor, QueryExecutor, QueryResult
from .query_source import QuerySource
from .schema import UserRecord, clear_tables, create_tables, drop_tables
from .session import build_engine

__all__ = [
    "Base",
    "DatabaseInfo",
    "Executor",
    "QueryExecutor",
    "QueryResult",
    "QuerySource",
    "UserRecord",
    "build_engine",
    "clear_tables",
    "create_tables",
    "drop_tables",
]
