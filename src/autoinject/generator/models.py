# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Value types passed between the stages of a generation pass.

All of them are immutable and live only for the duration of one pass.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from autoinject.lifetime import Lifetime


class TypeRef(BaseModel):
    """Reference to a class declared in the compilation."""

    model_config = ConfigDict(frozen=True)

    name: str
    qualname: str
    module: str

    @property
    def reference(self) -> str:
        """Dotted expression naming the class once its module is imported."""
        return f"{self.module}.{self.qualname}"


class CandidateType(BaseModel):
    """A class carrying exactly one recognised lifetime marker."""

    model_config = ConfigDict(frozen=True)

    name: str
    qualname: str
    module: str
    lifetime: Lifetime
    lineno: int

    @property
    def ref(self) -> TypeRef:
        return TypeRef(name=self.name, qualname=self.qualname, module=self.module)


class Pairing(BaseModel):
    """An accepted (contract, implementation, lifetime) triple."""

    model_config = ConfigDict(frozen=True)

    lifetime: Lifetime
    implementation: TypeRef
    contract: TypeRef


class ExclusionReason(str, Enum):
    """Why a marked class did not make it into the generated registrations."""

    DECORATOR_COUNT = "decorator_count"
    NO_CONTRACT = "no_contract"
    MULTIPLE_CONTRACTS = "multiple_contracts"
    OVERWRITTEN = "overwritten"


class Exclusion(BaseModel):
    """Diagnostic record for a marked class left out of the output."""

    model_config = ConfigDict(frozen=True)

    reason: ExclusionReason
    type_name: str
    module: str
    lineno: int
    lifetime: Lifetime | None = None
    detail: str = ""

    def __str__(self) -> str:
        return f"{self.module}:{self.lineno} {self.type_name}: {self.reason.value} {self.detail}".rstrip()


class GeneratedSource(BaseModel):
    """The single artifact a pass hands back to the host."""

    model_config = ConfigDict(frozen=True)

    hint_name: str
    text: str


class GenerationResult(BaseModel):
    """Outcome of one generation pass."""

    model_config = ConfigDict(frozen=True)

    source: GeneratedSource | None = None
    pairings: tuple[Pairing, ...] = ()
    namespaces: tuple[str, ...] = ()
    exclusions: tuple[Exclusion, ...] = ()

    @property
    def has_source(self) -> bool:
        return self.source is not None
