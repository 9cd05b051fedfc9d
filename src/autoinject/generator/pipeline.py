# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
The generation pass: scanner, resolver, pairing engine and emitter run once,
in sequence, over a compilation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autoinject.config import GeneratorSettings
from autoinject.generator.emitter import RegistrationEmitter
from autoinject.generator.models import GenerationResult
from autoinject.generator.pairing import pair
from autoinject.generator.resolver import SemanticModel
from autoinject.generator.scanner import scan
from autoinject.logging import get_logger

if TYPE_CHECKING:
    from autoinject.compilation import Compilation

logger = get_logger(__name__)


def generate(
    compilation: Compilation, settings: GeneratorSettings | None = None
) -> GenerationResult:
    """
    Run one generation pass.

    When no class in the compilation carries a lifetime marker, the result
    has no source and the host must not produce an artifact. Every value
    built here is discarded once the result is returned.

    Args:
        compilation: The source units of this pass
        settings: Generator settings; defaults are used when omitted

    Returns:
        The generated artifact (if any) with pairings and exclusion diagnostics

    Raises:
        SourceParseError: If a source unit is not valid Python
        SemanticBindingError: If a scanned class cannot be bound
    """
    settings = settings or GeneratorSettings()

    scanned = scan(compilation)
    table = None if scanned.is_empty else pair(scanned, SemanticModel(compilation))
    if table is None:
        logger.info(
            "No marked classes, nothing to generate",
            extra={"units": len(compilation), "exclusions": len(scanned.exclusions)},
        )
        return GenerationResult(exclusions=scanned.exclusions)

    source = RegistrationEmitter(settings).emit(table)
    logger.info(
        "Generated registrations",
        extra={
            "artifact": source.hint_name,
            "candidates": len(scanned),
            "pairings": len(table),
            "exclusions": len(table.exclusions),
        },
    )
    return GenerationResult(
        source=source,
        pairings=tuple(table),
        namespaces=table.namespaces,
        exclusions=tuple(table.exclusions),
    )
