"""
Service lifetimes recognised by the autoinject generator.

Each lifetime is tied to the marker decorator that requests it and to the
registration method called on the service collection.
"""

from __future__ import annotations

from enum import Enum


class Lifetime(Enum):
    """Enum representing the lifetimes a marked class can request.

    Declaration order is emission order.
    """

    SINGLETON = "singleton"
    """Service is created once and reused throughout the application."""

    TRANSIENT = "transient"
    """Service is created each time it's requested."""

    SCOPED = "scoped"
    """Service is created once per scope."""

    @property
    def marker(self) -> str:
        """Name of the decorator that marks a class with this lifetime."""
        return f"inject_as_{self.value}"

    def registration_method(self, prefix: str = "add_") -> str:
        """Name of the service collection method registering this lifetime."""
        return f"{prefix}{self.value}"

    @classmethod
    def from_marker(cls, name: str) -> Lifetime | None:
        """Map a marker decorator name to its lifetime, or None if unrecognised."""
        return _MARKERS.get(name)


_MARKERS: dict[str, Lifetime] = {lifetime.marker: lifetime for lifetime in Lifetime}
