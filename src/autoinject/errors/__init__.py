# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject

"""
Error handling for autoinject.
"""

from __future__ import annotations

from autoinject.errors.base import (
    INTERNAL_ERROR,
    AutoInjectError,
    ErrorCategory,
    ErrorCode,
    ErrorSeverity,
)
from autoinject.errors.host import (
    CONFIGURATION_ERROR,
    HOST,
    SOURCE_ROOT_ERROR,
    ConfigurationError,
    SourceRootError,
)

__all__ = [
    # Error categories
    "ErrorCode",
    "ErrorCategory",
    "ErrorSeverity",
    "HOST",
    # Error codes
    "CONFIGURATION_ERROR",
    "INTERNAL_ERROR",
    "SOURCE_ROOT_ERROR",
    # Errors
    "AutoInjectError",
    "ConfigurationError",
    "SourceRootError",
]
