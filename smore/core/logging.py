"""JSON logging for the API process.

Request-scoped fields are stamped onto each record by ``RequestContextFilter``
while the record is created, so they survive handlers that format later.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from ..middlewares import principal_ctx_var, request_id_ctx_var

# Fields copied from the request context onto every record.
CONTEXT_FIELDS = ("request_id", "principal")

# uvicorn's own access line duplicates ``request.completed`` from RequestIdMiddleware.
SILENCED_LOGGERS = ("uvicorn.access",)
REROUTED_LOGGERS = ("uvicorn", "uvicorn.error")


class RequestContextFilter(logging.Filter):
    """Attach the current request id and principal to the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_ctx_var.get()
        if getattr(record, "principal", None) is None:
            record.principal = principal_ctx_var.get()
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: event name, level, logger and structured extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value:
                payload[name] = value
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            # Structured fields never overwrite the envelope keys above.
            for key, value in extra.items():
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def setup_logging(level: str | int = logging.INFO) -> logging.Handler:
    """Send everything, uvicorn included, through a single JSON handler on the root logger."""

    if isinstance(level, str):
        level = level.upper()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    handler.addFilter(RequestContextFilter())
    logging.root.handlers = [handler]
    logging.root.setLevel(level)

    for name in REROUTED_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True
    for name in SILENCED_LOGGERS:
        silenced = logging.getLogger(name)
        silenced.handlers = []
        silenced.propagate = False
    return handler
