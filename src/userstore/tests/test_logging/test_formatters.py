import json
import logging
import sys

from userstore.core.logging.formatters import ColorFormatter, JsonFormatter


def make_record(level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("userstore.repo", level, __file__, 10, "repo.create.success", (), exc_info)
    record.__dict__.update(extra)
    return record


class Unserializable:
    def __str__(self):
        return "<unserializable>"


def test_json_formatter_standard_fields():
    out = json.loads(JsonFormatter(env="testing", service="userstore").format(make_record(correlation_id="c-1")))

    assert out["level"] == "INFO"
    assert out["logger"] == "userstore.repo"
    assert out["message"] == "repo.create.success"
    assert out["correlation_id"] == "c-1"
    assert out["service"] == "userstore"
    assert out["env"] == "testing"
    assert "version" in out
    assert "timestamp" in out


def test_json_formatter_includes_extras():
    record = make_record(operation="create", duration_ms=3, payload=Unserializable())

    out = json.loads(JsonFormatter().format(record))

    assert out["operation"] == "create"
    assert out["duration_ms"] == 3
    assert out["payload"] == "<unserializable>"
    assert "args" not in out
    assert "msg" not in out
    assert out["correlation_id"] == "-"


def test_json_formatter_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

    out = json.loads(JsonFormatter().format(record))

    assert "ValueError: boom" in out["exc_info"]


def test_color_formatter_line():
    line = ColorFormatter().format(make_record(level=logging.WARNING, correlation_id="c-9"))

    assert "WARNING" in line
    assert ColorFormatter.COLOR_CODES["WARNING"] in line
    assert "c-9" in line
    assert line.endswith("repo.create.success")
