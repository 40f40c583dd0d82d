"""
Custom logging formatters.

  - JsonFormatter: one JSON object per line, for log collectors. Carries the
    standard record fields, observability fields (service, env, version,
    correlation_id) and any `extra={...}` passed at the call site.

  - ColorFormatter: compact ANSI-colored lines for a developer terminal.

The builder (see builder.py) picks one of them from `settings.LOG_FORMAT`.
"""

import json
import logging
from logging import LogRecord
from typing import Any

from userstore.utils.logging import get_project_version

PROJECT_VERSION = get_project_version()

# Attributes every LogRecord has; anything else on the record came from `extra`.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction:
      - env: environment name (e.g. "development", "production")
      - service: logical service name to include in every record
      - datefmt: passed through to logging.Formatter (used by formatTime)

    Non-serializable extras are converted with `str()`, so formatting never raises.
    """

    def __init__(self, *, env: str | None = None, service: str = "userstore", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "correlation_id": getattr(record, "correlation_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PROJECT_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED or key in log_record or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development-friendly colored formatter:

        TIMESTAMP | LEVEL | LOGGER_NAME | CORRELATION_ID | MESSAGE

    The level is wrapped in ANSI color codes; tracebacks follow on new lines.
    """

    COLOR_CODES = {
        "DEBUG": "\033[36m",      # cyan
        "INFO": "\033[32m",       # green
        "WARNING": "\033[33m",    # yellow
        "ERROR": "\033[31m",      # red
        "CRITICAL": "\033[1;41m", # bold on red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]
        timestamp = self.formatTime(record, self.datefmt)

        base = (
            f"{timestamp} | {color}{record.levelname:<8}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'correlation_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            base = base + "\n" + self.formatException(record.exc_info)

        return base
