"""Interfaces for bus connection capabilities."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Mapping, Protocol


class SlotHandle(Protocol):
    """Keeps one interface registration alive."""

    def close(self) -> None:
        """Remove the registration. Calling it again is a no-op."""


class BusConnection(Protocol):
    """Shared connection that bus objects register and broadcast on."""

    def add_object_vtable(self, path: str, interface: str, vtable: Mapping[str, Any]) -> SlotHandle:
        """Install one interface's surface at ``path``."""

    def emit_object_added(self, path: str) -> None:
        """Broadcast that the object at ``path`` appeared with all its interfaces."""

    def emit_object_removed(self, path: str) -> None:
        """Broadcast that the object at ``path`` went away."""

    def emit_interfaces_added(self, path: str, interfaces: Iterable[str]) -> None:
        """Broadcast that ``interfaces`` appeared at ``path``."""

    def emit_interfaces_removed(self, path: str, interfaces: Iterable[str]) -> None:
        """Broadcast that ``interfaces`` went away from ``path``."""


class InterfaceBinding(Protocol):
    """One interface implementation attached to an object path."""

    interface: str

    def emit_added(self) -> None:
        """Announce this interface individually."""

    def close(self) -> None:
        """Release the registration."""
