# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Errors raised by the host side of a generation pass.

These cover collecting sources from disk and loading settings, as opposed to
faults inside the generator pipeline itself.
"""

from __future__ import annotations

from typing import Any, Final

from autoinject.errors.base import (
    AutoInjectError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
)

HOST: Final = ErrorCategory.get_or_create("HOST")
SOURCE_ROOT_ERROR: Final = ErrorCode.get_or_create("SOURCE_ROOT_ERROR", HOST)
CONFIGURATION_ERROR: Final = ErrorCode.get_or_create("CONFIGURATION_ERROR", HOST)


class SourceRootError(AutoInjectError):
    """Raised when the source root cannot be read."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = SOURCE_ROOT_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)


class ConfigurationError(AutoInjectError):
    """Raised when generator or logging settings are invalid."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = CONFIGURATION_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)
