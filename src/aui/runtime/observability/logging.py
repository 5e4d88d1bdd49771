"""Logging setup for the `aui` logger hierarchy.

Modules log through plain `logging.getLogger("aui.<area>")` loggers.
`configure_logging` attaches one handler to the `aui` root logger:
- "text": human-readable lines for development
- "json": JSON Lines (orjson) for log aggregation

Example:
    >>> configure_logging(level="DEBUG", format="json")
    >>> logging.getLogger("aui.executor").info("[add] Executing (server)")
    {"timestamp":"2024-01-03T10:30:45.123000+00:00","level":"INFO","logger":"aui.executor",...}
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import Literal, TextIO

import orjson

from aui.foundation.config import get_settings
from aui.runtime.middleware import current_tool

LogFormat = Literal["json", "text"]

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Attribute marking the handler installed by configure_logging
_MARKER = "_aui_handler"


class JsonFormatter(logging.Formatter):
    """One JSON object per record. The executing tool's name is added when known."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if (tool := current_tool()) is not None:
            data["tool"] = tool
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=str).decode()


def configure_logging(
    level: str | int | None = None,
    format: LogFormat | None = None,  # noqa: A002 - matches settings field
    *,
    stream: TextIO | None = None,
) -> logging.Handler:
    """Install (or replace) the handler on the `aui` logger.

    Args:
        level: Minimum level name or number (default: settings.logging.level)
        format: "text" or "json" (default: settings.logging.format)
        stream: Output stream (default: stderr)

    Returns:
        The installed handler
    """
    cfg = get_settings().logging
    level = level if level is not None else cfg.level
    format = format or cfg.format
    if format not in ("json", "text"):
        raise ValueError(f"Unknown format: {format}. Use 'json' or 'text'")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if format == "json" else logging.Formatter(TEXT_FORMAT))
    setattr(handler, _MARKER, True)

    root = logging.getLogger("aui")
    for existing in [h for h in root.handlers if getattr(h, _MARKER, False)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
