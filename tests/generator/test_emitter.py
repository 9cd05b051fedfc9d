"""Tests for the registration module emitter."""

from __future__ import annotations

import textwrap

import pytest

from autoinject.config import GeneratorSettings
from autoinject.generator.emitter import EmissionBuffer, RegistrationEmitter, emit
from autoinject.generator.models import Pairing, TypeRef
from autoinject.generator.pairing import PairingTable
from autoinject.lifetime import Lifetime


def _pairing(lifetime: Lifetime, impl: str, contract: str) -> Pairing:
    impl_module, _, impl_name = impl.rpartition(".")
    contract_module, _, contract_name = contract.rpartition(".")
    return Pairing(
        lifetime=lifetime,
        implementation=TypeRef(name=impl_name, qualname=impl_name, module=impl_module),
        contract=TypeRef(
            name=contract_name, qualname=contract_name, module=contract_module
        ),
    )


def _table(*pairings: Pairing) -> PairingTable:
    table = PairingTable()
    for pairing in pairings:
        table.add(pairing)
    return table


EXPECTED_SINGLE = '''\
# This module is generated by autoinject. Do not edit it by hand.
# ruff: noqa
"""Service registrations generated from lifetime markers."""

from __future__ import annotations

from typing import Any, TypeVar

_T = TypeVar("_T")


def _mark(cls: type[_T] | None, lifetime: str) -> Any:
    def apply(target: type[_T]) -> type[_T]:
        setattr(target, "__autoinject_lifetime__", lifetime)
        return target

    return apply if cls is None else apply(cls)


def inject_as_singleton(cls: type[_T] | None = None) -> Any:
    """Mark a class for registration with the singleton lifetime."""
    return _mark(cls, "singleton")


def inject_as_transient(cls: type[_T] | None = None) -> Any:
    """Mark a class for registration with the transient lifetime."""
    return _mark(cls, "transient")


def inject_as_scoped(cls: type[_T] | None = None) -> Any:
    """Mark a class for registration with the scoped lifetime."""
    return _mark(cls, "scoped")


import app.services
import app.contracts


def auto_inject(services: Any) -> Any:
    """Register every discovered contract with its implementation."""
    services.add_singleton(app.contracts.IFoo, app.services.Foo)
    return services
'''


def test_renders_complete_module() -> None:
    source = emit(
        _table(_pairing(Lifetime.SINGLETON, "app.services.Foo", "app.contracts.IFoo"))
    )

    assert source.hint_name == "auto_injector.py"
    assert source.text == EXPECTED_SINGLE


def test_markers_are_emitted_once_regardless_of_namespaces() -> None:
    source = emit(
        _table(
            _pairing(Lifetime.SINGLETON, "a.one.Foo", "a.contracts.IFoo"),
            _pairing(Lifetime.TRANSIENT, "b.two.Bar", "b.contracts.IBar"),
            _pairing(Lifetime.SCOPED, "c.three.Baz", "c.contracts.IBaz"),
        )
    )

    for lifetime in Lifetime:
        assert source.text.count(f"def {lifetime.marker}(") == 1
    imports = [line for line in source.text.splitlines() if line.startswith("import ")]
    assert imports == [
        "import a.one",
        "import a.contracts",
        "import b.two",
        "import b.contracts",
        "import c.three",
        "import c.contracts",
    ]


def test_registrations_ordered_by_lifetime_then_insertion() -> None:
    source = emit(
        _table(
            _pairing(Lifetime.SCOPED, "m.Scoped1", "m.IScoped"),
            _pairing(Lifetime.TRANSIENT, "m.Transient1", "m.ITransient"),
            _pairing(Lifetime.SINGLETON, "m.Single2", "m.ISingle"),
            _pairing(Lifetime.SINGLETON, "m.Single1", "m.ISingle"),
        )
    )

    calls = [
        line.strip()
        for line in source.text.splitlines()
        if line.strip().startswith("services.add_")
    ]
    assert calls == [
        "services.add_singleton(m.ISingle, m.Single2)",
        "services.add_singleton(m.ISingle, m.Single1)",
        "services.add_transient(m.ITransient, m.Transient1)",
        "services.add_scoped(m.IScoped, m.Scoped1)",
    ]


def test_empty_table_has_markers_but_no_routine() -> None:
    text = emit(PairingTable()).text

    assert "def inject_as_scoped(" in text
    assert "def auto_inject(" not in text
    assert "\nimport " not in text
    compile(text, "auto_injector.py", "exec")


def test_settings_rename_routine_and_methods() -> None:
    settings = GeneratorSettings(
        output_name="container_setup",
        routine_name="register_all",
        registration_prefix="register_",
    )
    source = RegistrationEmitter(settings).emit(
        _table(_pairing(Lifetime.TRANSIENT, "app.Foo", "app.IFoo"))
    )

    assert source.hint_name == "container_setup.py"
    assert "def register_all(services: Any) -> Any:" in source.text
    assert "    services.register_transient(app.IFoo, app.Foo)" in source.text


def test_parameter_does_not_shadow_imported_package() -> None:
    text = emit(
        _table(_pairing(Lifetime.SINGLETON, "services.impl.Foo", "services.api.IFoo"))
    ).text

    assert "def auto_inject(services_: Any) -> Any:" in text
    assert "    services_.add_singleton(services.api.IFoo, services.impl.Foo)" in text
    assert "    return services_" in text


def test_nested_classes_use_qualified_names() -> None:
    pairing = Pairing(
        lifetime=Lifetime.SCOPED,
        implementation=TypeRef(name="Impl", qualname="Outer.Impl", module="app"),
        contract=TypeRef(name="IInner", qualname="Outer.IInner", module="app"),
    )

    assert "services.add_scoped(app.Outer.IInner, app.Outer.Impl)" in emit(
        _table(pairing)
    ).text


def test_output_is_valid_python() -> None:
    text = emit(
        _table(
            _pairing(Lifetime.SINGLETON, "a.Foo", "a.IFoo"),
            _pairing(Lifetime.SCOPED, "b.Bar", "b.IBar"),
        )
    ).text

    compile(text, "auto_injector.py", "exec")
    assert text.endswith("    return services\n")


class TestEmissionBuffer:
    def test_indents_and_joins(self) -> None:
        buffer = EmissionBuffer()
        buffer.line("def f():").line("return 1", 1).blank()

        assert buffer.flush() == textwrap.dedent(
            """\
            def f():
                return 1
            """
        )

    def test_flushes_only_once(self) -> None:
        buffer = EmissionBuffer()
        buffer.line("x = 1")
        buffer.flush()

        with pytest.raises(RuntimeError):
            buffer.flush()
        with pytest.raises(RuntimeError):
            buffer.line("y = 2")
