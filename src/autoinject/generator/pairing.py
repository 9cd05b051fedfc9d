# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: autoinject
"""
Pairing engine.

Turns scanned candidates into (contract, implementation, lifetime) pairings,
keeping only classes that implement exactly one interface, and collects the
modules the generated code has to import.
"""

from __future__ import annotations

from collections.abc import Iterator

from autoinject.generator.models import (
    CandidateType,
    Exclusion,
    ExclusionReason,
    Pairing,
)
from autoinject.generator.resolver import SemanticModel
from autoinject.generator.scanner import ScanResult
from autoinject.lifetime import Lifetime
from autoinject.logging import get_logger

logger = get_logger(__name__)


class PairingTable:
    """Lifetime-keyed pairings plus the modules they reference.

    Within a lifetime, pairings are keyed by implementation name in insertion
    order; assigning an existing name replaces the pairing in place.
    """

    def __init__(self) -> None:
        self.tables: dict[Lifetime, dict[str, Pairing]] = {
            lifetime: {} for lifetime in Lifetime
        }
        self._namespaces: dict[str, None] = {}
        self.exclusions: list[Exclusion] = []

    def add(self, pairing: Pairing) -> Pairing | None:
        """Store a pairing, returning the one it replaced, if any."""
        table = self.tables[pairing.lifetime]
        previous = table.get(pairing.implementation.name)
        table[pairing.implementation.name] = pairing
        self._namespaces.setdefault(pairing.implementation.module)
        self._namespaces.setdefault(pairing.contract.module)
        return previous

    def __getitem__(self, lifetime: Lifetime) -> dict[str, Pairing]:
        return self.tables[lifetime]

    def __iter__(self) -> Iterator[Pairing]:
        for lifetime in Lifetime:
            yield from self.tables[lifetime].values()

    def __len__(self) -> int:
        return sum(len(table) for table in self.tables.values())

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def namespaces(self) -> tuple[str, ...]:
        """Modules referenced by any pairing, in first-use order."""
        return tuple(self._namespaces)


def _exclude(
    table: PairingTable,
    candidate: CandidateType,
    reason: ExclusionReason,
    detail: str = "",
) -> None:
    exclusion = Exclusion(
        reason=reason,
        type_name=candidate.name,
        module=candidate.module,
        lineno=candidate.lineno,
        lifetime=candidate.lifetime,
        detail=detail,
    )
    table.exclusions.append(exclusion)
    logger.debug(
        "Excluded marked class",
        extra={"type": candidate.qualname, "reason": reason, "detail": detail},
    )


def pair(scan: ScanResult, model: SemanticModel) -> PairingTable | None:
    """
    Build the pairing table for a scan.

    Candidates are visited Singleton first, then Transient, then Scoped, each
    in scan order. A candidate with exactly one resolved interface becomes a
    pairing; one with none or several is excluded. A later candidate with
    the same name and lifetime replaces an earlier one.

    Args:
        scan: Candidates grouped by lifetime
        model: Semantic model of the same compilation

    Returns:
        The pairing table, or None when the scan found nothing to generate

    Raises:
        SemanticBindingError: If a candidate has no symbol in the model
    """
    if scan.is_empty:
        return None

    table = PairingTable()
    table.exclusions.extend(scan.exclusions)
    accepted: dict[tuple[Lifetime, str], CandidateType] = {}

    for lifetime in Lifetime:
        for candidate in scan[lifetime]:
            contracts = model.all_interfaces(candidate)
            if not contracts:
                _exclude(table, candidate, ExclusionReason.NO_CONTRACT)
                continue
            if len(contracts) > 1:
                names = ", ".join(contract.qualname for contract in contracts)
                _exclude(table, candidate, ExclusionReason.MULTIPLE_CONTRACTS, names)
                continue

            previous = table.add(
                Pairing(
                    lifetime=lifetime,
                    implementation=candidate.ref,
                    contract=contracts[0].ref,
                )
            )
            if previous is not None:
                _exclude(
                    table,
                    accepted[(lifetime, candidate.name)],
                    ExclusionReason.OVERWRITTEN,
                    f"replaced by {candidate.module}.{candidate.qualname}",
                )
            accepted[(lifetime, candidate.name)] = candidate

    logger.debug(
        "Paired candidates",
        extra={"pairings": len(table), "exclusions": len(table.exclusions)},
    )
    return table
