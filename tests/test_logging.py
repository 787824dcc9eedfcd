import json
import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from smore.core.logging import JsonLogFormatter, RequestContextFilter, setup_logging
from smore.middlewares import principal_ctx_var, request_id_ctx_var


def _record(msg="project.created", **kwargs):
    return logging.makeLogRecord(
        {"name": "smore.projects", "levelno": logging.INFO, "levelname": "INFO", "msg": msg, **kwargs}
    )


@pytest.fixture()
def request_context():
    rid = request_id_ctx_var.set("req-1")
    who = principal_ctx_var.set("user:7")
    try:
        yield
    finally:
        request_id_ctx_var.reset(rid)
        principal_ctx_var.reset(who)


def test_filter_stamps_request_context(request_context):
    record = _record()

    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "req-1"
    assert record.principal == "user:7"


def test_formatter_renders_event_context_and_extras(request_context):
    record = _record(extra_data={"project_id": 3, "level": "debug"}, created=0)
    RequestContextFilter().filter(record)

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["timestamp"] == "1970-01-01T00:00:00.000Z"
    assert payload["event"] == "project.created"
    assert payload["logger"] == "smore.projects"
    assert payload["request_id"] == "req-1"
    assert payload["principal"] == "user:7"
    assert payload["project_id"] == 3
    assert payload["level"] == "INFO"


def test_formatter_outside_a_request_omits_context():
    record = _record()
    RequestContextFilter().filter(record)

    payload = json.loads(JsonLogFormatter().format(record))

    assert "request_id" not in payload
    assert "principal" not in payload


def test_formatter_includes_exception_text():
    try:
        raise RuntimeError("disk full")
    except RuntimeError:
        record = _record(msg="db.commit_failed", exc_info=sys.exc_info())

    payload = json.loads(JsonLogFormatter().format(record))

    assert "RuntimeError: disk full" in payload["exception"]


def test_setup_logging_routes_uvicorn_through_root():
    saved_root = (logging.root.handlers[:], logging.root.level)
    access = logging.getLogger("uvicorn.access")
    saved_access = (access.handlers[:], access.propagate)
    try:
        handler = setup_logging("debug")

        assert logging.root.handlers == [handler]
        assert logging.root.level == logging.DEBUG
        assert isinstance(handler.formatter, JsonLogFormatter)
        assert logging.getLogger("uvicorn.error").propagate is True
        assert access.propagate is False
    finally:
        logging.root.handlers, level = saved_root
        logging.root.setLevel(level)
        access.handlers, access.propagate = saved_access
