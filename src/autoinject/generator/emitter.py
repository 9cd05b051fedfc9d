# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Emitter for the generated registration module.

Renders a pairing table as Python source: the three marker decorators, one
``import`` per referenced module and, when anything was paired, a routine
that registers every pairing on a service collection.
"""

from __future__ import annotations

from autoinject.config import GeneratorSettings
from autoinject.generator.models import GeneratedSource
from autoinject.generator.pairing import PairingTable
from autoinject.lifetime import Lifetime

HEADER = "# This module is generated by autoinject. Do not edit it by hand."
INDENT = "    "


class EmissionBuffer:
    """Append-only line buffer, flushed once."""

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._flushed = False

    def line(self, text: str = "", level: int = 0) -> EmissionBuffer:
        if self._flushed:
            raise RuntimeError("Emission buffer has already been flushed")
        self._lines.append(f"{INDENT * level}{text}" if text else "")
        return self

    def blank(self, count: int = 1) -> EmissionBuffer:
        for _ in range(count):
            self.line()
        return self

    def flush(self) -> str:
        if self._flushed:
            raise RuntimeError("Emission buffer has already been flushed")
        self._flushed = True
        return "\n".join(self._lines).rstrip("\n") + "\n"


class RegistrationEmitter:
    """Renders pairing tables into the generated module's source text."""

    def __init__(self, settings: GeneratorSettings | None = None) -> None:
        self.settings = settings or GeneratorSettings()

    def emit(self, table: PairingTable) -> GeneratedSource:
        """
        Render the artifact for a pairing table.

        The output depends only on the table and the settings, so the same
        input always yields the same text.
        """
        buffer = EmissionBuffer()
        self._emit_preamble(buffer)
        self._emit_markers(buffer)
        self._emit_imports(buffer, table.namespaces)
        if not table.is_empty:
            self._emit_routine(buffer, table)
        return GeneratedSource(hint_name=self.settings.artifact_name, text=buffer.flush())

    def _emit_preamble(self, buffer: EmissionBuffer) -> None:
        buffer.line(HEADER)
        buffer.line("# ruff: noqa")
        buffer.line('"""Service registrations generated from lifetime markers."""')
        buffer.blank()
        buffer.line("from __future__ import annotations")
        buffer.blank()
        buffer.line("from typing import Any, TypeVar")
        buffer.blank()
        buffer.line('_T = TypeVar("_T")')
        buffer.blank(2)
        buffer.line("def _mark(cls: type[_T] | None, lifetime: str) -> Any:")
        buffer.line("def apply(target: type[_T]) -> type[_T]:", 1)
        buffer.line('setattr(target, "__autoinject_lifetime__", lifetime)', 2)
        buffer.line("return target", 2)
        buffer.blank()
        buffer.line("return apply if cls is None else apply(cls)", 1)

    def _emit_markers(self, buffer: EmissionBuffer) -> None:
        for lifetime in Lifetime:
            buffer.blank(2)
            buffer.line(f"def {lifetime.marker}(cls: type[_T] | None = None) -> Any:")
            buffer.line(
                f'"""Mark a class for registration with the {lifetime.value} lifetime."""',
                1,
            )
            buffer.line(f'return _mark(cls, "{lifetime.value}")', 1)

    def _emit_imports(self, buffer: EmissionBuffer, namespaces: tuple[str, ...]) -> None:
        if not namespaces:
            return
        buffer.blank(2)
        # Imported after the markers so modules importing them from here
        # find them defined even while this module is still initialising.
        for namespace in namespaces:
            buffer.line(f"import {namespace}")

    def _emit_routine(self, buffer: EmissionBuffer, table: PairingTable) -> None:
        prefix = self.settings.registration_prefix
        # The parameter must not shadow an imported top-level package
        roots = {namespace.partition(".")[0] for namespace in table.namespaces}
        param = "services"
        while param in roots:
            param += "_"

        buffer.blank(2)
        buffer.line(f"def {self.settings.routine_name}({param}: Any) -> Any:")
        buffer.line('"""Register every discovered contract with its implementation."""', 1)
        for lifetime in Lifetime:
            method = lifetime.registration_method(prefix)
            for pairing in table[lifetime].values():
                buffer.line(
                    f"{param}.{method}({pairing.contract.reference}, "
                    f"{pairing.implementation.reference})",
                    1,
                )
        buffer.line(f"return {param}", 1)


def emit(table: PairingTable, settings: GeneratorSettings | None = None) -> GeneratedSource:
    """Render a pairing table with a default-configured emitter."""
    return RegistrationEmitter(settings).emit(table)
