# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Configuration for autoinject logging.

Settings are environment-driven, using the ``AUTOINJECT_LOGGING_`` prefix.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseSettings):
    """Logging settings for the ``autoinject`` logger hierarchy."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOINJECT_LOGGING_",
        extra="ignore",
        case_sensitive=False,
    )

    level: str = Field(default="WARNING", description="Log level name")
    json_format: bool = False
    include_timestamp: bool = True
    include_level: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Accept level names in any case."""
        if isinstance(v, str):
            v = v.upper()
        if v not in LEVEL_NAMES:
            raise ValueError(f"Invalid log level: {v!r}")
        return v

    @property
    def stdlib_level(self) -> int:
        return logging.getLevelNamesMapping()[self.level]

    def verbose(self) -> LoggingSettings:
        """A copy of these settings logging at DEBUG."""
        return self.model_copy(update={"level": "DEBUG"})

    @classmethod
    def load(cls) -> LoggingSettings:
        """
        Load logging settings from environment variables or defaults.

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        return cls()
