# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Declaration scanner.

Walks every class declaration of a compilation and sorts the ones carrying a
single lifetime marker into one bucket per lifetime.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator
from typing import TYPE_CHECKING

from autoinject.generator.models import CandidateType, Exclusion, ExclusionReason
from autoinject.lifetime import Lifetime
from autoinject.logging import get_logger

if TYPE_CHECKING:
    from autoinject.compilation import Compilation

logger = get_logger(__name__)


class _ClassCollector(ast.NodeVisitor):
    """Collects class definitions in source order, with their qualified names.

    Function bodies are not entered; classes defined there are not reachable
    by name.
    """

    def __init__(self) -> None:
        self._stack: list[str] = []
        self.found: list[tuple[str, ast.ClassDef]] = []

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        qualname = ".".join([*self._stack, node.name])
        self.found.append((qualname, node))
        self._stack.append(node.name)
        for statement in node.body:
            self.visit(statement)
        self._stack.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        return None

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        return None

    def visit_Lambda(self, node: ast.Lambda) -> None:
        return None


def iter_class_defs(tree: ast.Module) -> Iterator[tuple[str, ast.ClassDef]]:
    """Yield ``(qualname, node)`` for every reachable class in a module."""
    collector = _ClassCollector()
    collector.visit(tree)
    yield from collector.found


def decorator_name(decorator: ast.expr) -> str:
    """Textual name of a decorator, ignoring any call arguments."""
    if isinstance(decorator, ast.Call):
        decorator = decorator.func
    return ast.unparse(decorator)


class ScanResult:
    """Marked classes grouped by lifetime, in encounter order."""

    def __init__(
        self,
        buckets: dict[Lifetime, tuple[CandidateType, ...]],
        exclusions: tuple[Exclusion, ...] = (),
    ) -> None:
        self.buckets = {lifetime: buckets.get(lifetime, ()) for lifetime in Lifetime}
        self.exclusions = exclusions

    def __getitem__(self, lifetime: Lifetime) -> tuple[CandidateType, ...]:
        return self.buckets[lifetime]

    @property
    def is_empty(self) -> bool:
        """True when no lifetime bucket holds a candidate."""
        return not any(self.buckets.values())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.buckets.values())


def classify(node: ast.ClassDef) -> Lifetime | None:
    """
    Lifetime requested by a class declaration.

    Only a declaration with exactly one decorator, whose name is one of the
    recognised markers, requests a lifetime.
    """
    if len(node.decorator_list) != 1:
        return None
    return Lifetime.from_marker(decorator_name(node.decorator_list[0]))


def scan(compilation: Compilation) -> ScanResult:
    """
    Classify every class declaration of the compilation by lifetime marker.

    Declarations without a marker, with an unrecognised decorator, or with
    more than one decorator are left out. The last group is recorded as an
    exclusion when a recognised marker is among its decorators.

    Args:
        compilation: The source units to scan

    Returns:
        The per-lifetime candidate buckets

    Raises:
        SourceParseError: If a source unit cannot be parsed
    """
    buckets: dict[Lifetime, list[CandidateType]] = {lifetime: [] for lifetime in Lifetime}
    exclusions: list[Exclusion] = []

    for unit in compilation:
        for qualname, node in iter_class_defs(unit.tree):
            lifetime = classify(node)
            if lifetime is not None:
                buckets[lifetime].append(
                    CandidateType(
                        name=node.name,
                        qualname=qualname,
                        module=unit.module,
                        lifetime=lifetime,
                        lineno=node.lineno,
                    )
                )
                continue

            if len(node.decorator_list) > 1:
                markers = [
                    name
                    for name in map(decorator_name, node.decorator_list)
                    if Lifetime.from_marker(name) is not None
                ]
                if markers:
                    exclusion = Exclusion(
                        reason=ExclusionReason.DECORATOR_COUNT,
                        type_name=node.name,
                        module=unit.module,
                        lineno=node.lineno,
                        detail=f"{len(node.decorator_list)} decorators, markers: {', '.join(markers)}",
                    )
                    exclusions.append(exclusion)
                    logger.debug(
                        "Excluded marked class",
                        extra={"type": node.name, "reason": exclusion.reason},
                    )

    return ScanResult(
        {lifetime: tuple(found) for lifetime, found in buckets.items()},
        tuple(exclusions),
    )
