# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Logger setup for autoinject.

This module configures Python's standard logging module for the
``autoinject`` logger hierarchy, with structured extra fields rendered
either as ``key=value`` pairs or as JSON.
"""

from __future__ import annotations

import enum
import json
import logging
import sys
from typing import Any

from autoinject.logging.config import LoggingSettings

ROOT_LOGGER_NAME = "autoinject"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class StructuredFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields after the message."""

    def __init__(
        self,
        json_format: bool = False,
        include_timestamp: bool = True,
        include_level: bool = True,
    ) -> None:
        """Initialize a structured formatter.

        Args:
            json_format: Whether to format logs as JSON
            include_timestamp: Whether to include timestamps in logs
            include_level: Whether to include log level in logs
        """
        self.json_format = json_format
        self.include_timestamp = include_timestamp
        self.include_level = include_level

        fmt = "%(message)s"
        if include_timestamp:
            fmt = "%(asctime)s " + fmt
        if include_level and not json_format:
            fmt = fmt + " [%(levelname)s]"

        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record with structured data."""
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if self.json_format:
            return self._format_json(record, extra)
        return self._format_text(super().format(record), extra)

    def _format_json(self, record: logging.LogRecord, extra: dict[str, Any]) -> str:
        log_data: dict[str, Any] = {"message": record.getMessage(), "logger": record.name}
        log_data.update({k: self._json_value(v) for k, v in extra.items()})
        if self.include_level:
            log_data["level"] = record.levelname
        if self.include_timestamp:
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)

    def _format_text(self, message: str, extra: dict[str, Any]) -> str:
        if not extra:
            return message
        ctx_str = " ".join(f"{k}={self._format_value(v)}" for k, v in extra.items())
        return f"{message} {ctx_str}"

    def _json_value(self, value: Any) -> Any:
        if isinstance(value, enum.Enum):
            return value.value
        if isinstance(value, str | int | float | bool) or value is None:
            return value
        if isinstance(value, list | tuple):
            return [self._json_value(v) for v in value]
        return str(value)

    def _format_value(self, value: Any) -> str:
        if isinstance(value, str):
            # Quote strings that contain spaces
            if " " in value:
                return f'"{value}"'
            return value
        if isinstance(value, enum.Enum):
            return value.name
        try:
            return json.dumps(self._json_value(value))
        except TypeError:
            return str(value)


def configure_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """
    Configure the ``autoinject`` logger from settings.

    Replaces any handler installed by a previous call, so calling this more
    than once does not duplicate output.

    Args:
        settings: Logging settings; loaded from the environment when omitted

    Returns:
        The configured root ``autoinject`` logger
    """
    settings = settings or LoggingSettings.load()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_autoinject_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        StructuredFormatter(
            json_format=settings.json_format,
            include_timestamp=settings.include_timestamp,
            include_level=settings.include_level,
        )
    )
    handler._autoinject_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(settings.stdlib_level)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the ``autoinject`` hierarchy.

    Args:
        name: Dotted module name; names outside the hierarchy are nested under it

    Returns:
        A standard library logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
