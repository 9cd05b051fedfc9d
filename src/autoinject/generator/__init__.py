# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject

"""
Public API of the registration generator.
"""

from __future__ import annotations

from autoinject.generator.emitter import RegistrationEmitter, emit
from autoinject.generator.errors import SemanticBindingError, SourceParseError
from autoinject.generator.models import (
    CandidateType,
    Exclusion,
    ExclusionReason,
    GeneratedSource,
    GenerationResult,
    Pairing,
    TypeRef,
)
from autoinject.generator.pairing import PairingTable, pair
from autoinject.generator.pipeline import generate
from autoinject.generator.resolver import ClassSymbol, SemanticModel
from autoinject.generator.scanner import ScanResult, scan

__all__ = [
    "CandidateType",
    "ClassSymbol",
    "Exclusion",
    "ExclusionReason",
    "GeneratedSource",
    "GenerationResult",
    "Pairing",
    "PairingTable",
    "RegistrationEmitter",
    "ScanResult",
    "SemanticBindingError",
    "SemanticModel",
    "SourceParseError",
    "TypeRef",
    "emit",
    "generate",
    "pair",
    "scan",
]
