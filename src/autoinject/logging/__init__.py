# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject

"""
Public API for autoinject logging.
"""

from __future__ import annotations

from autoinject.logging.config import LoggingSettings
from autoinject.logging.logger import (
    ROOT_LOGGER_NAME,
    StructuredFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "LoggingSettings",
    "ROOT_LOGGER_NAME",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
]
