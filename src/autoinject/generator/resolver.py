# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Contract resolver.

Builds a semantic model over the whole compilation (class symbols and import
bindings per module) and uses it to compute the full, flattened set of
interfaces a class implements, including those inherited through base
classes and base interfaces.

A class counts as an interface when it explicitly lists ``Protocol`` or
``ABC`` among its bases, or declares ``metaclass=ABCMeta``. Bases that do not
resolve to a class of the compilation contribute nothing.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from autoinject.generator.errors import SemanticBindingError
from autoinject.generator.models import CandidateType, TypeRef
from autoinject.generator.scanner import iter_class_defs

if TYPE_CHECKING:
    from autoinject.compilation import Compilation, SourceUnit

INTERFACE_BASES = frozenset(
    {
        "typing.Protocol",
        "typing_extensions.Protocol",
        "abc.ABC",
        # Unbound names, e.g. brought in by a star import
        "Protocol",
        "ABC",
    }
)
INTERFACE_METACLASSES = frozenset({"abc.ABCMeta", "ABCMeta"})


class ClassSymbol:
    """A class declared somewhere in the compilation."""

    def __init__(
        self,
        module: str,
        qualname: str,
        node: ast.ClassDef,
        parent: ClassSymbol | None = None,
    ) -> None:
        self.module = module
        self.qualname = qualname
        self.node = node
        self.parent = parent
        self.members: dict[str, ClassSymbol] = {}

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def key(self) -> tuple[str, str, int]:
        return (self.module, self.qualname, self.node.lineno)

    @property
    def ref(self) -> TypeRef:
        return TypeRef(name=self.name, qualname=self.qualname, module=self.module)

    def __repr__(self) -> str:
        return f"ClassSymbol({self.module}.{self.qualname})"


@dataclass(frozen=True)
class _ModuleRef:
    name: str


@dataclass(frozen=True)
class _External:
    """Something outside the compilation, known only by its dotted name."""

    name: str


@dataclass(frozen=True)
class _FromImport:
    source: str
    attr: str


_Resolved = Union[ClassSymbol, _ModuleRef, _External]
_Binding = Union[ClassSymbol, _ModuleRef, _FromImport]


def _iter_module_statements(body: list[ast.stmt]) -> Iterator[ast.stmt]:
    """Yield module-level statements, entering conditional and guarded blocks."""
    for statement in body:
        yield statement
        if isinstance(statement, ast.If | ast.While | ast.For | ast.With):
            yield from _iter_module_statements(statement.body)
            yield from _iter_module_statements(getattr(statement, "orelse", []))
        elif isinstance(statement, ast.Try):
            yield from _iter_module_statements(statement.body)
            for handler in statement.handlers:
                yield from _iter_module_statements(handler.body)
            yield from _iter_module_statements(statement.orelse)
            yield from _iter_module_statements(statement.finalbody)


def _package_of(unit: SourceUnit) -> str:
    if unit.is_package:
        return unit.module
    return unit.module.rpartition(".")[0]


def _absolute_module(unit: SourceUnit, node: ast.ImportFrom) -> str:
    if not node.level:
        return node.module or ""
    parts = _package_of(unit).split(".") if _package_of(unit) else []
    if node.level > 1:
        parts = parts[: len(parts) - (node.level - 1)]
    if node.module:
        parts.append(node.module)
    return ".".join(parts)


class SemanticModel:
    """Symbol and import binding tables for one compilation."""

    def __init__(self, compilation: Compilation) -> None:
        self._modules = {unit.module for unit in compilation}
        # Latest definition of each name, as Python binds it
        self._classes: dict[tuple[str, str], ClassSymbol] = {}
        self._declarations: dict[tuple[str, str, int], ClassSymbol] = {}
        self._bindings: dict[str, dict[str, _Binding]] = {}
        self._star_imports: dict[str, list[str]] = {}
        self._bases: dict[tuple[str, str, int], list[_Resolved | None]] = {}
        self._interface: dict[tuple[str, str, int], bool] = {}

        for unit in compilation:
            self._index(unit)

    def _index(self, unit: SourceUnit) -> None:
        tree = unit.tree
        for qualname, node in iter_class_defs(tree):
            parent_name = qualname.rpartition(".")[0]
            parent = self._classes.get((unit.module, parent_name)) if parent_name else None
            symbol = ClassSymbol(unit.module, qualname, node, parent)
            self._classes[(unit.module, qualname)] = symbol
            self._declarations[symbol.key] = symbol
            if parent is not None:
                parent.members[node.name] = symbol

        bindings: dict[str, _Binding] = {}
        stars: list[str] = []
        for statement in _iter_module_statements(tree.body):
            if isinstance(statement, ast.ClassDef):
                bindings[statement.name] = self._classes[(unit.module, statement.name)]
            elif isinstance(statement, ast.Import):
                for alias in statement.names:
                    if alias.asname:
                        bindings[alias.asname] = _ModuleRef(alias.name)
                    else:
                        top = alias.name.partition(".")[0]
                        bindings[top] = _ModuleRef(top)
            elif isinstance(statement, ast.ImportFrom):
                source = _absolute_module(unit, statement)
                for alias in statement.names:
                    if alias.name == "*":
                        stars.append(source)
                    else:
                        bindings[alias.asname or alias.name] = _FromImport(
                            source, alias.name
                        )
        self._bindings[unit.module] = bindings
        self._star_imports[unit.module] = stars

    def _is_module(self, name: str) -> bool:
        return name in self._modules or any(
            module.startswith(f"{name}.") for module in self._modules
        )

    def _lookup(
        self, module: str, name: str, seen: set[tuple[str, str]]
    ) -> _Resolved | None:
        """Resolve a global name of a compilation module, following re-exports."""
        if (module, name) in seen:
            return None
        seen.add((module, name))

        binding = self._bindings.get(module, {}).get(name)
        if binding is None:
            for source in self._star_imports.get(module, []):
                if source in self._modules:
                    found = self._lookup(source, name, seen)
                    if found is not None:
                        return found
            return None
        if isinstance(binding, _FromImport):
            return self._member(_ModuleRef(binding.source), binding.attr, seen)
        return binding

    def _member(
        self, target: _Resolved | None, attr: str, seen: set[tuple[str, str]]
    ) -> _Resolved | None:
        if isinstance(target, ClassSymbol):
            return target.members.get(attr)
        if isinstance(target, _External):
            return _External(f"{target.name}.{attr}")
        if isinstance(target, _ModuleRef):
            if target.name in self._modules:
                found = self._lookup(target.name, attr, seen)
                if found is not None:
                    return found
            submodule = f"{target.name}.{attr}"
            if self._is_module(submodule):
                return _ModuleRef(submodule)
            if not self._is_module(target.name):
                return _External(submodule)
        return None

    def _resolve(self, expr: ast.expr, symbol: ClassSymbol) -> _Resolved | None:
        """Resolve an expression appearing in the header of ``symbol``."""
        if isinstance(expr, ast.Subscript):
            return self._resolve(expr.value, symbol)
        if isinstance(expr, ast.Attribute):
            return self._member(self._resolve(expr.value, symbol), expr.attr, set())
        if isinstance(expr, ast.Name):
            # The header of a nested class is evaluated in its parent's body
            if symbol.parent is not None and expr.id in symbol.parent.members:
                return symbol.parent.members[expr.id]
            found = self._lookup(symbol.module, expr.id, set())
            if found is None and expr.id not in self._bindings.get(symbol.module, {}):
                return _External(expr.id)
            return found
        return None

    def bases(self, symbol: ClassSymbol) -> list[_Resolved | None]:
        """Resolved explicit bases of a class, in declaration order."""
        if symbol.key not in self._bases:
            self._bases[symbol.key] = [
                self._resolve(base, symbol) for base in symbol.node.bases
            ]
        return self._bases[symbol.key]

    def is_interface(self, symbol: ClassSymbol) -> bool:
        """Whether a class declares itself a protocol or abstract base."""
        if symbol.key not in self._interface:
            result = any(
                isinstance(base, _External) and base.name in INTERFACE_BASES
                for base in self.bases(symbol)
            )
            if not result:
                for keyword in symbol.node.keywords:
                    if keyword.arg != "metaclass":
                        continue
                    metaclass = self._resolve(keyword.value, symbol)
                    if (
                        isinstance(metaclass, _External)
                        and metaclass.name in INTERFACE_METACLASSES
                    ):
                        result = True
            self._interface[symbol.key] = result
        return self._interface[symbol.key]

    def symbol_for(self, candidate: CandidateType) -> ClassSymbol:
        """
        Look up the class symbol of a scanned candidate.

        A module may define the same name more than once; the candidate is
        matched to the declaration on its own line. A candidate whose line
        matches no declaration falls back to the latest definition.

        Raises:
            SemanticBindingError: If the candidate is not in the model
        """
        symbol = self._declarations.get(
            (candidate.module, candidate.qualname, candidate.lineno)
        ) or self._classes.get((candidate.module, candidate.qualname))
        if symbol is None:
            raise SemanticBindingError(
                f"No symbol for class '{candidate.qualname}' in module '{candidate.module}'",
                module=candidate.module,
                qualname=candidate.qualname,
            )
        return symbol

    def all_interfaces(self, candidate: CandidateType | ClassSymbol) -> list[ClassSymbol]:
        """
        Every interface a class implements, direct and inherited.

        Interfaces are listed in first-encounter order, depth first through
        the declared bases, without duplicates. The class itself is never
        part of its own result.
        """
        if isinstance(candidate, CandidateType):
            symbol = self.symbol_for(candidate)
        else:
            symbol = candidate

        found: dict[tuple[str, str, int], ClassSymbol] = {}
        seen = {symbol.key}

        def visit(current: ClassSymbol) -> None:
            for base in self.bases(current):
                if not isinstance(base, ClassSymbol) or base.key in seen:
                    continue
                seen.add(base.key)
                if self.is_interface(base):
                    found[base.key] = base
                visit(base)

        visit(symbol)
        return list(found.values())
