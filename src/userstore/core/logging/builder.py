"""
Logging builder: build a dictConfig mapping from Settings and apply it.

    make_dict_config(settings)  -> dict (pure, easy to test)
    setup_logging(settings)     -> applies it, creating LOG_DIR when writing files

Handlers:
  - console always
  - file + error_file when LOG_TO_STDOUT is false and LOG_DIR is set
  - error_console otherwise
"""

import logging
import logging.config
from pathlib import Path

from userstore.config.settings import Settings
from userstore.utils.logging import get_project_name
from .filters import CorrelationIdFilter, RedactFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)


def _writes_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    formatters = {
        "standard": {
            # colors only make sense for the text format
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "correlation_id": {"()": CorrelationIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _writes_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # SQL statements carry bound parameters (emails); keep them quiet unless asked.
            "sqlalchemy.engine": {
                "level": "INFO" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "aiosqlite": {
                "level": "WARNING",
                "propagate": True,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration built from `settings`.

    Safe to call more than once (dictConfig replaces the previous handlers).
    """
    if _writes_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    # Root-level filter as well, so records handled by handlers added later
    # still carry a correlation_id.
    logging.getLogger().addFilter(CorrelationIdFilter())
