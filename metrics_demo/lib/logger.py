"""Structured JSON logging shared by the demo application and its listeners."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, Mapping

_DEFAULT_LEVEL = logging.INFO

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message"}


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line.

    ``static_fields`` are merged into every record, so each line can be
    attributed to the emitting service without repeating it at call sites.
    Per-call ``extra`` values win over static ones.
    """

    def __init__(self, static_fields: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields: dict[str, Any] = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self.static_fields,
        }
        payload.update(_json_safe(_record_extras(record)))

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)

        return json.dumps(payload, ensure_ascii=False)


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}


def _json_safe(fields: Mapping[str, Any]) -> dict[str, Any]:
    safe: dict[str, Any] = {}
    for key, value in fields.items():
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = repr(value)
        safe[key] = value
    return safe


def _structured_handler(root: logging.Logger) -> logging.Handler | None:
    for handler in root.handlers:
        if isinstance(handler.formatter, JsonFormatter):
            return handler
    return None


def configure_logging(
    level: int | str | None = None,
    static_fields: Mapping[str, Any] | None = None,
) -> None:
    """Install the JSON handler on the root logger, or update it if present.

    Repeated calls only adjust the level and static fields they are given.
    """

    root = logging.getLogger()
    handler = _structured_handler(root)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(_DEFAULT_LEVEL)

    if level is not None:
        root.setLevel(level)
    if static_fields is not None:
        formatter = handler.formatter
        if isinstance(formatter, JsonFormatter):
            formatter.static_fields = dict(static_fields)


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
