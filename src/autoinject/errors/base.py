# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Base error classes for autoinject.

This module provides structured errors with error codes, categories and
contextual information. Every error the generator raises derives from
AutoInjectError.
"""

from __future__ import annotations

import threading
import traceback
from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar, Final, TypeVar

T = TypeVar("T", bound="AutoInjectError")


class ErrorSeverity(str, Enum):
    """Severity levels for autoinject errors."""

    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErrorCategory:
    """Named error category, interned by name."""

    _categories: ClassVar[dict[str, ErrorCategory]] = {}
    _lock: ClassVar[threading.RLock] = threading.RLock()

    def __init__(self, name: str, parent: ErrorCategory | None = None) -> None:
        """Initialize a new error category.

        Args:
            name: Unique identifier for this category
            parent: Optional parent category for hierarchical structure
        """
        self.name = name
        self.parent = parent

    def __str__(self) -> str:
        return self.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorCategory):
            return False
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def is_subcategory_of(self, category: ErrorCategory) -> bool:
        """Check if this category is the given category or one of its children."""
        current: ErrorCategory | None = self
        while current:
            if current == category:
                return True
            current = current.parent
        return False

    @classmethod
    def get_or_create(
        cls, name: str, parent: ErrorCategory | None = None
    ) -> ErrorCategory:
        """Get or create an error category."""
        with cls._lock:
            if name not in cls._categories:
                cls._categories[name] = cls(name, parent)
            return cls._categories[name]


class ErrorCode:
    """Error code bound to a category, interned by code."""

    _codes: ClassVar[dict[str, ErrorCode]] = {}
    _lock: ClassVar[threading.RLock] = threading.RLock()

    def __init__(self, code: str, category: ErrorCategory) -> None:
        self.code = code
        self.category = category

    def __str__(self) -> str:
        return self.code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorCode):
            return False
        return self.code == other.code

    def __hash__(self) -> int:
        return hash(self.code)

    @classmethod
    def get_or_create(cls, code: str, category: ErrorCategory) -> ErrorCode:
        """Get or create an error code."""
        with cls._lock:
            if code not in cls._codes:
                cls._codes[code] = cls(code, category)
            return cls._codes[code]


INTERNAL: Final = ErrorCategory.get_or_create("INTERNAL")
INTERNAL_ERROR: Final = ErrorCode.get_or_create("INTERNAL_ERROR", INTERNAL)


class AutoInjectError(Exception):
    """
    Base error class for autoinject errors.
    Should only be subclassed for specific errors, not instantiated directly.
    """

    message: str
    code: ErrorCode
    severity: ErrorSeverity
    context: dict[str, Any]
    timestamp: datetime

    def __new__(cls, *args: Any, **kwargs: Any) -> AutoInjectError:
        if cls is AutoInjectError:
            raise TypeError(
                "Do not instantiate AutoInjectError directly; subclass it for specific errors."
            )
        return super().__new__(cls)

    def __init__(
        self,
        message: str,
        code: ErrorCode = INTERNAL_ERROR,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize a new error.

        Args:
            message: Human-readable error message
            code: ErrorCode object containing the code and category
            severity: Severity level of the error
            context: Additional contextual information
            **kwargs: Additional context keys
        """
        if not isinstance(code, ErrorCode):
            raise TypeError("code must be an ErrorCode instance, not a string")

        full_context = dict(context or {})
        full_context.update(kwargs)

        super().__init__(message)
        self.message = message
        self.code = code
        self.category = code.category
        self.severity = severity
        self.context = full_context
        self.timestamp = datetime.now(UTC)

    def add_context(self, key: str, value: Any) -> AutoInjectError:
        """Add a key-value pair to the error context and return self for chaining."""
        self.context[key] = value
        return self

    @classmethod
    def wrap(
        cls: type[T],
        exception: Exception,
        message: str | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: dict[str, Any] | None = None,
    ) -> T:
        """Wrap an existing exception in an error of this class.

        Args:
            exception: The original exception to wrap
            message: Human-readable error message (defaults to exception message)
            severity: Severity level of the error
            context: Additional contextual information

        Returns:
            A new instance of the subclass with the original chained as cause
        """
        merged_context = dict(context or {})
        merged_context.update(
            {
                "original_type": type(exception).__name__,
                "original_message": str(exception),
                "traceback": traceback.format_exception(
                    type(exception), exception, exception.__traceback__
                ),
            }
        )
        error = cls(
            message or f"Error occurred: {exception}",
            severity=severity,
            context=merged_context,
        )
        error.__cause__ = exception
        return error

    def __str__(self) -> str:
        """Get string representation of the error.

        Returns:
            String in format 'code: message'
        """
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a dictionary representation of the error."""
        return {
            "code": self.code.code,
            "message": self.message,
            "category": self.category.name,
            "severity": self.severity.value,
            "context": {k: v for k, v in self.context.items() if k != "traceback"},
            "timestamp": self.timestamp.isoformat(),
        }
