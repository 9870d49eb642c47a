"""Utilities for configuring structured logging across the project."""

from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from typing import Any

__all__ = ["StructuredFormatter", "TextFormatter", "configure_logging"]


_STANDARD_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__,
) | {"message", "asctime", "taskName"}


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields passed through ``extra=`` on the logging call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_RECORD_FIELDS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:
        """Convert a record to JSON, preserving extra fields."""
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        payload.update(_record_extras(record))

        return json.dumps(payload, ensure_ascii=False, sort_keys=True, default=str)


class TextFormatter(logging.Formatter):
    """Render log records as ``[time] LEVEL logger: message | key=value`` lines."""

    def format(self, record: logging.LogRecord) -> str:
        """Convert a record to a human readable line."""
        line = (
            f"[{self.formatTime(record, self.datefmt)}] "
            f"{record.levelname:<7} {record.name}: {record.getMessage()}"
        )
        extras = _record_extras(record)
        if extras:
            rendered = " ".join(
                f"{key}={json.dumps(value, ensure_ascii=False, default=str)}"
                for key, value in sorted(extras.items())
            )
            line = f"{line} | {rendered}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: int | str, *, json_mode: bool = True) -> None:
    """Initialise the root logger with console output on stderr."""
    if isinstance(level, str):
        mapping = logging.getLevelNamesMapping()
        numeric_level = mapping.get(level.upper(), logging.INFO)
    else:
        numeric_level = int(level)

    formatter = StructuredFormatter if json_mode else TextFormatter

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": formatter,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": numeric_level,
                    "formatter": "console",
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {
                "level": numeric_level,
                "handlers": ["console"],
            },
        },
    )
