from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from userstore.config.settings import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the AsyncEngine for `settings.DATABASE_URL`.

    The engine (and its connection pool) belongs to whoever calls this; close it
    with `await engine.dispose()` or through `QueryExecutor.close()`.
    """
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.SQLALCHEMY_ECHO,
        pool_pre_ping=True,              # Enables connection health checks
    )
