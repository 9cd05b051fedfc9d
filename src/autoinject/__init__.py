# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject

"""
autoinject: generates dependency-injection registrations from lifetime markers.
"""

from __future__ import annotations

from autoinject.compilation import Compilation, SourceUnit
from autoinject.config import GeneratorSettings
from autoinject.generator import GeneratedSource, GenerationResult, generate
from autoinject.lifetime import Lifetime

__version__ = "0.1.0"

__all__ = [
    "Compilation",
    "GeneratedSource",
    "GenerationResult",
    "GeneratorSettings",
    "Lifetime",
    "SourceUnit",
    "generate",
]
