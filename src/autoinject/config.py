# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Configuration for the autoinject generator.

Settings are read from environment variables prefixed with ``AUTOINJECT_``
and can be overridden by keyword arguments.
"""

from __future__ import annotations

import keyword
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autoinject.errors import ConfigurationError

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
    ".git",
    ".venv",
    "venv",
    "__pycache__",
    "build",
    "dist",
    ".tox",
    "node_modules",
)


class GeneratorSettings(BaseSettings):
    """
    Settings controlling the names used in the generated artifact and
    which directories are collected into a compilation.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUTOINJECT_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    output_name: str = Field(
        default="auto_injector", description="Module name of the generated artifact"
    )
    routine_name: str = Field(
        default="auto_inject", description="Name of the generated registration routine"
    )
    registration_prefix: str = Field(
        default="add_",
        description="Prefix of the service collection registration methods",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names skipped when collecting sources",
    )

    @field_validator("output_name", "routine_name")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Validate that the value can be used as a Python name."""
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"'{v}' is not a valid Python identifier")
        return v

    @field_validator("registration_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Validate that prefix + lifetime forms a method name."""
        if not f"{v}singleton".isidentifier():
            raise ValueError(f"'{v}' cannot prefix a method name")
        return v

    @property
    def artifact_name(self) -> str:
        """File name the artifact is handed over under."""
        return f"{self.output_name}.py"

    @classmethod
    def load(cls, **overrides: Any) -> GeneratorSettings:
        """
        Load settings from the environment, applying explicit overrides.

        Raises:
            ConfigurationError: If any value fails validation
        """
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError.wrap(
                e, message=f"Invalid generator settings: {e.error_count()} error(s)"
            ) from e
