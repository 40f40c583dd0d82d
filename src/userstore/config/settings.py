from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache


def _upper(value: str | None) -> str | None:
    return value.upper() if isinstance(value, str) else value


def _lower(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration
    POSTGRES_DRIVER: str = "psycopg"
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "userstore"

    # Test database configuration
    TEST_POSTGRES_DB: str | None = None
    TESTING: bool = False

    # Full SQLAlchemy URL; when set it wins over the POSTGRES_* parts
    # (e.g. "sqlite+aiosqlite:///./userstore.db").
    DB_URL: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False

    # Directory holding the <name>.sql query files (defaults to the packaged queries)
    QUERIES_DIR: Path | None = None

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/userstore")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        - `DB_URL`, when provided, is used as-is.
        - If `TESTING=True` and `TEST_POSTGRES_DB` is provided, the URL points at
          the test database so tests never touch the regular one.
        - Otherwise the URL is built from the POSTGRES_* settings.
        """
        if self.DB_URL:
            return self.DB_URL

        database = self.POSTGRES_DB
        if self.TESTING and self.TEST_POSTGRES_DB:
            database = self.TEST_POSTGRES_DB

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{database}"
        )

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Normalize LOG_LEVEL to uppercase before the Literal check, so
        `LOG_LEVEL=debug` is accepted.
        """
        return _upper(v)

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return _lower(v)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() avoids re-reading .env on every call.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
