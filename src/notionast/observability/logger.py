"""Structured JSON logger for notionast.

The package logs one thing: non-fatal conversion warnings, emitted by
:func:`~notionast.converter.diagnostics.emit_warning` through the
``notionast.converter`` logger.  Each record is written as a single-line
JSON object whose structured fields (``code``, ``block_id``,
``parent_id``, ...) sit at the top level next to the message::

    {"ts": "2026-01-01T12:00:00.123456+00:00", "level": "WARNING",
     "logger": "notionast.converter",
     "message": "Unsupported block type: collection_view",
     "code": "UNSUPPORTED_BLOCK_TYPE", "block_id": "1f3c..."}

Usage::

    from notionast.observability import get_logger

    log = get_logger()
    log.info("page rendered", extra={"extra_fields": {"root_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    ``ts``, ``level``, ``logger`` and ``message`` are always present.
    Fields passed as ``extra={"extra_fields": {...}}`` are merged in
    without overriding those four; ``exception`` is added for records
    logged with ``exc_info``.
    """

    def format(self, record: logging.LogRecord) -> str:
        fields: dict[str, Any] = dict(getattr(record, "extra_fields", None) or {})
        fields.update(
            ts=datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        if record.exc_info and record.exc_info[1] is not None:
            fields["exception"] = self.formatException(record.exc_info)
        return json.dumps(fields, default=str)


def _has_structured_handler(logger: logging.Logger) -> bool:
    return any(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers)


def get_logger(
    name: str = "notionast",
    *,
    level: int | str = logging.DEBUG,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Return *name* with a :class:`StructuredFormatter` handler attached.

    The handler is added once per logger; later calls return the logger
    unchanged.  The logger stops propagating so a warning is not written
    twice by a root handler.
    """
    logger = logging.getLogger(name)
    if _has_structured_handler(logger):
        return logger

    logger.setLevel(level.upper() if isinstance(level, str) else level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
