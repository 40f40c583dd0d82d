"""
Logging filters

Correlation ID filter and helpers, plus redaction of sensitive extras.

A correlation id ties together every log line emitted while serving one logical
unit of work (a request, a job, a CLI invocation). The caller sets it once with
`set_correlation_id()`; the value lives in a `contextvars.ContextVar`, so it
follows the work across `await` boundaries and does not leak between asyncio
tasks.

`CorrelationIdFilter` guarantees every LogRecord carries a `correlation_id`
attribute (the real id or the sentinel "-"), so formatters referencing
`%(correlation_id)s` never fail.

Usage:
    token = set_correlation_id("job-42")
    try:
        await repo.create(data)
    finally:
        reset_correlation_id(token)
"""

import contextvars
import logging
from logging import LogRecord

_correlation_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(correlation_id: str | None) -> contextvars.Token:
    """
    Set the correlation id in the current context.

    Returns:
        token: pass it to reset_correlation_id(token) to restore the previous value
    """
    return _correlation_id_ctx.set(correlation_id)


def reset_correlation_id(token: contextvars.Token) -> None:
    _correlation_id_ctx.reset(token)


def get_correlation_id() -> str | None:
    return _correlation_id_ctx.get()


class CorrelationIdFilter(logging.Filter):
    """
    Stamp `record.correlation_id` with, in order of preference:
      - a value passed explicitly via `extra={"correlation_id": ...}`
      - the contextvar value
      - "-"
    Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.correlation_id = (
            getattr(record, "correlation_id", None) or get_correlation_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    # User emails are personal data; repository code may pass them as extras.
    SENSITIVE = {
        "email",
        "password",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
    }
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                record.__dict__[key] = self.MASK
        return True
