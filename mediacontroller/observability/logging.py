"""
Structured Logging: JSON-Formatted with Context Fields

Provides:
- JSON-formatted log output
- Keyword fields attached to individual log calls
- Context propagation (e.g. source_id) via contextvars

Library modules log through StructuredLogger and never install handlers;
setup_logging() is for applications such as the CLI.
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Optional, TextIO


class LogLevel(IntEnum):
    """Log level enumeration."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        return cls[name.strip().upper()]


# Context variable for scoped fields
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

# Attributes every logging.LogRecord carries; anything else is an extra
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename",
    "funcName", "levelname", "levelno", "lineno",
    "module", "msecs", "pathname", "process",
    "processName", "relativeCreated", "stack_info",
    "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message", "asctime",
})


@dataclass
class LogRecord:
    """Structured log record."""
    timestamp: str
    level: str
    message: str
    logger_name: str
    extra: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize to JSON."""
        data = {
            "@timestamp": self.timestamp,
            "level": self.level,
            "message": self.message,
            "logger": self.logger_name,
        }
        data.update(self.extra)
        return json.dumps(data, default=str)


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter with context fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        extra = dict(_log_context.get())

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                extra[key] = value

        if record.exc_info:
            extra["exception"] = self.formatException(record.exc_info)

        log_record = LogRecord(
            timestamp=datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            level=record.levelname,
            message=record.getMessage(),
            logger_name=record.name,
            extra=extra,
        )

        return log_record.to_json()


class TextFormatter(logging.Formatter):
    """Human-readable formatter that appends context and extra fields."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = dict(_log_context.get())
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                fields[key] = value
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


class StructuredLogger:
    """
    Structured logger with context propagation.

    Usage:
        logger = StructuredLogger("mediacontroller.session")

        with logger.context(source_id="Spotify.exe"):
            logger.info("Relaying song change", title="...")
    """

    __slots__ = ("_logger", "_default_extra")

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)
        self._default_extra: dict[str, Any] = {}

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(LogLevel.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        self._log(LogLevel.ERROR, message, exc_info=True, **kwargs)

    def _log(self, level: LogLevel, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level.value):
            return
        extra = {**self._default_extra, **kwargs}
        self._logger.log(level.value, message, exc_info=exc_info, extra=extra)

    def with_extra(self, **kwargs: Any) -> StructuredLogger:
        """Create child logger with additional default fields."""
        new_logger = StructuredLogger(self._logger.name)
        new_logger._default_extra = {**self._default_extra, **kwargs}
        return new_logger

    @property
    def name(self) -> str:
        return self._logger.name

    @staticmethod
    def context(**kwargs: Any) -> _LogContext:
        """Context manager for scoped fields."""
        return _LogContext(kwargs)


class _LogContext:
    """Context manager for adding fields to all logs."""

    __slots__ = ("_fields", "_token")

    def __init__(self, fields: dict[str, Any]) -> None:
        self._fields = fields
        self._token = None

    def __enter__(self) -> _LogContext:
        new_context = {**_log_context.get(), **self._fields}
        self._token = _log_context.set(new_context)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            _log_context.reset(self._token)
            self._token = None


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure root logger for structured logging.

    Args:
        level: Minimum log level
        json_output: Use JSON formatting
        stream: Output stream (default: stderr)
    """
    root = logging.getLogger()
    root.setLevel(level.value)

    # Remove existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level.value)
    handler.setFormatter(JsonFormatter() if json_output else TextFormatter())

    root.addHandler(handler)

    # Suppress noisy loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
