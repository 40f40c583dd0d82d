"""
File-backed source of SQL text.

Each query lives in `<queries_dir>/<name>.sql`. Loaded text is memoized per
`QuerySource` instance for its whole lifetime; `clear_cache()` drops it.
"""
import logging
from pathlib import Path

from userstore.exceptions.base import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_QUERIES_DIR = Path(__file__).resolve().parent / "queries"


class QuerySource:
    def __init__(self, queries_dir: str | Path | None = None):
        self.queries_dir = Path(queries_dir) if queries_dir is not None else DEFAULT_QUERIES_DIR
        self._cache: dict[str, str] = {}

    def load_query(self, name: str) -> str:
        """
        Return the SQL text for `name`.

        Raises:
            ConfigurationError: if `<name>.sql` does not exist or cannot be read.
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        path = self.queries_dir / f"{name}.sql"
        try:
            sql = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("query_source.load_failed", extra={"query": name, "path": str(path)})
            raise ConfigurationError(f"Failed to load SQL query '{name}': {exc}") from exc

        self._cache[name] = sql
        logger.debug("query_source.loaded", extra={"query": name})
        return sql

    def has_query(self, name: str) -> bool:
        return name in self._cache or (self.queries_dir / f"{name}.sql").is_file()

    def clear_cache(self) -> None:
        self._cache.clear()

    def list_available(self) -> list[str]:
        """
        Names of all `.sql` files in the queries directory, sorted.

        Raises:
            ConfigurationError: if the directory cannot be read.
        """
        try:
            return sorted(p.stem for p in self.queries_dir.iterdir() if p.suffix == ".sql")
        except OSError as exc:
            raise ConfigurationError(f"Failed to read queries directory: {exc}") from exc
