"""Structured JSON logging for mdblocks.

All package loggers live under ``mdblocks`` and propagate to it; the
``mdblocks`` logger owns the single JSON handler.  A record looks like::

    {"ts": "2026-10-19T12:00:00.123456+00:00", "level": "DEBUG",
     "logger": "mdblocks.converter", "message": "markdown decomposed",
     "op": "convert", "blocks": 12, "source_length": 804}

Per-conversion records are emitted at ``DEBUG``; the package logger starts
at ``WARNING``.  Turn them on with
``logging.getLogger("mdblocks").setLevel(logging.DEBUG)``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

PACKAGE_LOGGER = "mdblocks"


class StructuredFormatter(logging.Formatter):
    """Render a record as one line of JSON.

    Keys ``ts``, ``level``, ``logger`` and ``message`` are always present.
    ``extra={"extra_fields": {...}}`` is merged in at the top level, and
    ``exception`` is added for records logged with ``exc_info``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _configure_package_logger() -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.setLevel(logging.WARNING)
        root.propagate = False
    return root


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return the logger *name*, installing the package JSON handler once.

    *name* should be ``"mdblocks"`` or a dotted child of it so that records
    reach the handler.
    """
    _configure_package_logger()
    return logging.getLogger(name)
