# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Generator-specific error classes.

Only faults that abort a generation pass live here. Declarations the
generator cannot pair are excluded and reported as diagnostics instead.
"""

from __future__ import annotations

from typing import Any, Final

from autoinject.errors.base import (
    AutoInjectError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
)

GENERATION: Final = ErrorCategory.get_or_create("GENERATION")
SOURCE_PARSE_ERROR: Final = ErrorCode.get_or_create("SOURCE_PARSE_ERROR", GENERATION)
SEMANTIC_BINDING_ERROR: Final = ErrorCode.get_or_create(
    "SEMANTIC_BINDING_ERROR", GENERATION
)


class SourceParseError(AutoInjectError):
    """Raised when a source unit of the compilation is not valid Python."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = SOURCE_PARSE_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)


class SemanticBindingError(AutoInjectError):
    """Raised when a scanned declaration has no symbol in the semantic model."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = SEMANTIC_BINDING_ERROR,
        severity: ErrorSeverity = ErrorSeverity.CRITICAL,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, code=code, severity=severity, context=context, **kwargs)
