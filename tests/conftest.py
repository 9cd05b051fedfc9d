"""Top-level pytest configuration for autoinject."""

from __future__ import annotations

import logging
import sys
import textwrap
from collections.abc import Callable, Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

import pytest

from autoinject.compilation import Compilation
from autoinject.logging import ROOT_LOGGER_NAME

CONTRACTS = """
from typing import Protocol


class IFoo(Protocol):
    def run(self) -> None: ...


class IBar(Protocol):
    def bar(self) -> None: ...


class IBarExtra(Protocol):
    def extra(self) -> None: ...
"""


class RecordingServices:
    """Service collection stand-in that records registration calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any, Any]] = []

    def add_singleton(self, contract: Any, implementation: Any) -> RecordingServices:
        self.calls.append(("singleton", contract, implementation))
        return self

    def add_transient(self, contract: Any, implementation: Any) -> RecordingServices:
        self.calls.append(("transient", contract, implementation))
        return self

    def add_scoped(self, contract: Any, implementation: Any) -> RecordingServices:
        self.calls.append(("scoped", contract, implementation))
        return self


@pytest.fixture
def compile_sources() -> Callable[..., Compilation]:
    """Build a compilation from dedented ``{module: source}`` pairs."""

    def factory(
        sources: Mapping[str, str], packages: Iterable[str] = ()
    ) -> Compilation:
        return Compilation.from_sources(
            {module: textwrap.dedent(text) for module, text in sources.items()},
            packages,
        )

    return factory


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[Mapping[str, str]], Path]:
    """Write ``{relative path: source}`` files below a temporary root."""

    def factory(files: Mapping[str, str]) -> Path:
        for relative, text in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(text), encoding="utf-8")
        return tmp_path

    return factory


@pytest.fixture
def services() -> RecordingServices:
    return RecordingServices()


@pytest.fixture
def isolated_modules() -> Iterator[None]:
    """Forget modules imported during a test so later tests re-import them."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        del sys.modules[name]


@pytest.fixture
def contracts() -> str:
    """Source of an ``app.contracts`` module with three protocols."""
    return CONTRACTS


@pytest.fixture(autouse=True)
def reset_autoinject_logger() -> Iterator[None]:
    """Drop handlers installed by the CLI so they don't outlive its streams."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
