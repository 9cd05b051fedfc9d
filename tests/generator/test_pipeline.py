"""End-to-end tests for a generation pass."""

from __future__ import annotations

import importlib

import pytest

from autoinject.compilation import Compilation
from autoinject.generator import ExclusionReason, SourceParseError, generate
from autoinject.lifetime import Lifetime

SERVICES_A = """
from app.contracts import IFoo

@inject_as_singleton
class Foo(IFoo):
    def run(self) -> None: ...
"""

SERVICES_B = """
from app.contracts import IBar, IBarExtra

@inject_as_transient
class Bar(IBar, IBarExtra): ...
"""

SERVICES_C = """
@inject_as_scoped
class Baz: ...
"""


class TestScenarios:
    """Reference scenarios for the generator."""

    def test_single_interface_singleton(self, compile_sources, contracts) -> None:
        result = generate(
            compile_sources({"app.contracts": contracts, "app.services": SERVICES_A})
        )

        assert result.source is not None
        text = result.source.text
        assert text.count("services.add_") == 1
        assert "    services.add_singleton(app.contracts.IFoo, app.services.Foo)" in text
        assert "import app.services\n" in text
        assert "import app.contracts\n" in text
        assert result.namespaces == ("app.services", "app.contracts")
        [pairing] = result.pairings
        assert pairing.lifetime is Lifetime.SINGLETON
        assert pairing.contract.name == "IFoo"
        assert pairing.implementation.name == "Foo"

    def test_two_interfaces_are_dropped(self, compile_sources, contracts) -> None:
        result = generate(
            compile_sources({"app.contracts": contracts, "app.services": SERVICES_B})
        )

        assert result.source is not None
        assert "Bar" not in result.source.text
        assert "def auto_inject(" not in result.source.text
        assert result.pairings == ()
        assert [e.reason for e in result.exclusions] == [
            ExclusionReason.MULTIPLE_CONTRACTS
        ]

    def test_no_interface_is_dropped(self, compile_sources) -> None:
        result = generate(compile_sources({"app.services": SERVICES_C}))

        assert result.source is not None
        assert "Baz" not in result.source.text
        assert result.pairings == ()
        assert [e.reason for e in result.exclusions] == [ExclusionReason.NO_CONTRACT]

    def test_no_marked_types_yields_no_artifact(self, compile_sources, contracts) -> None:
        result = generate(
            compile_sources(
                {
                    "app.contracts": contracts,
                    "app.services": """
                    from dataclasses import dataclass
                    from app.contracts import IFoo

                    @dataclass
                    class Foo(IFoo): ...
                    """,
                }
            )
        )

        assert result.source is None
        assert not result.has_source
        assert result.pairings == ()

    def test_mixed_scenarios_keep_only_accepted(self, compile_sources, contracts) -> None:
        result = generate(
            compile_sources(
                {
                    "app.contracts": contracts,
                    "app.services": SERVICES_A,
                    "app.bar": SERVICES_B,
                    "app.baz": SERVICES_C,
                }
            )
        )

        assert result.source is not None
        assert [p.implementation.name for p in result.pairings] == ["Foo"]
        assert result.namespaces == ("app.services", "app.contracts")
        assert {e.type_name for e in result.exclusions} == {"Bar", "Baz"}


def test_generation_is_deterministic(compile_sources, contracts) -> None:
    sources = {
        "app.contracts": contracts,
        "app.services": SERVICES_A,
        "app.more": """
        from app.contracts import IBar

        @inject_as_scoped
        class Scoped(IBar): ...

        @inject_as_transient
        class Transient(IBar): ...
        """,
    }

    first = generate(compile_sources(sources))
    second = generate(compile_sources(sources))

    assert first.source is not None
    assert second.source is not None
    assert first.source.text == second.source.text
    assert first == second


def test_duplicate_names_last_declared_wins(compile_sources, contracts) -> None:
    result = generate(
        compile_sources(
            {
                "app.contracts": contracts,
                "app.first": SERVICES_A,
                "app.second": SERVICES_A,
            }
        )
    )

    assert result.source is not None
    assert result.source.text.count("services.add_singleton(") == 1
    assert "services.add_singleton(app.contracts.IFoo, app.second.Foo)" in result.source.text
    assert [e.reason for e in result.exclusions] == [ExclusionReason.OVERWRITTEN]


def test_exclusion_is_idempotent(compile_sources, contracts) -> None:
    sources = {"app.contracts": contracts, "app.services": SERVICES_B}

    assert generate(compile_sources(sources)) == generate(compile_sources(sources))


def test_parse_error_aborts_pass(compile_sources) -> None:
    with pytest.raises(SourceParseError):
        generate(compile_sources({"app.ok": SERVICES_C, "app.broken": "def (:\n"}))


def test_generated_module_registers_real_classes(
    write_tree, services, monkeypatch, isolated_modules
) -> None:
    root = write_tree(
        {
            "shop/__init__.py": "",
            "shop/contracts.py": """
            from typing import Protocol

            class IClock(Protocol):
                def now(self) -> int: ...

            class IRepository(Protocol):
                def get(self, key: str) -> str: ...
            """,
            "shop/services.py": """
            from auto_injector import inject_as_scoped, inject_as_singleton
            from shop.contracts import IClock, IRepository

            @inject_as_singleton
            class SystemClock(IClock):
                def now(self) -> int:
                    return 0

            @inject_as_scoped
            class MemoryRepository(IRepository):
                def get(self, key: str) -> str:
                    return key
            """,
        }
    )

    result = generate(Compilation.from_directory(root))
    assert result.source is not None
    (root / result.source.hint_name).write_text(result.source.text, encoding="utf-8")
    monkeypatch.syspath_prepend(str(root))

    injector = importlib.import_module("auto_injector")
    returned = injector.auto_inject(services)

    contracts_module = importlib.import_module("shop.contracts")
    services_module = importlib.import_module("shop.services")
    assert returned is services
    assert services.calls == [
        ("singleton", contracts_module.IClock, services_module.SystemClock),
        ("scoped", contracts_module.IRepository, services_module.MemoryRepository),
    ]
    assert services_module.SystemClock.__autoinject_lifetime__ == "singleton"
