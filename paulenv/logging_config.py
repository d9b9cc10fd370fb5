"""Logging configuration for paulenv.

Engine code logs with structured fields passed through `extra`:
- engine: name of the container engine ("podman", "docker")
- operation: engine operation that failed ("build", "remove", ...)
- argv: the command line that was run
- returncode: exit status of that command (None if it never started)

The JSON format emits them as top-level keys, the text format appends
them after the message. Records go to stderr: stdout belongs to the
engine output streamed during builds and interactive sessions.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from paulenv.config import settings

ENGINE_FIELDS = ("engine", "operation", "argv", "returncode")


class EngineContextFilter(logging.Filter):
    """Stamps the active engine on records that do not name one."""

    def __init__(self, engine: str = ""):
        super().__init__()
        self.engine = engine

    def filter(self, record: logging.LogRecord) -> bool:
        if self.engine and getattr(record, "engine", None) is None:
            record.engine = self.engine
        return True


def engine_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Engine fields set on a record, skipping unset ones."""
    fields = {}
    for name in ENGINE_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            fields[name] = value
    return fields


class PaulenvJSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message plus engine fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(engine_fields(record))

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class PaulenvTextFormatter(logging.Formatter):
    """[timestamp] LEVEL [engine] logger: message (operation=... returncode=...)"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        fields = engine_fields(record)
        engine = fields.pop("engine", None)
        # argv is already part of the messages that carry it
        fields.pop("argv", None)

        engine_part = f" [{engine}]" if engine else ""
        message = f"[{timestamp}] {record.levelname:8}{engine_part} {record.name}: {record.getMessage()}"
        if fields:
            details = " ".join(f"{key}={value}" for key, value in fields.items())
            message += f" ({details})"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def setup_logging(
    engine: str = "",
    log_format: str | None = None,
    log_level: str | None = None,
) -> logging.Handler:
    """Send paulenv logs to stderr.

    Args:
        engine: Active container engine, stamped on records without one
        log_format: "json" or "text"; defaults to settings.log_format
        log_level: Level name; defaults to settings.log_level

    Returns:
        The installed handler, replacing any previous root handler
    """
    log_format = (log_format or settings.log_format).lower()
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(EngineContextFilter(engine))
    if log_format == "json":
        handler.setFormatter(PaulenvJSONFormatter())
    else:
        handler.setFormatter(PaulenvTextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # asyncio logs subprocess transport details at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return handler
