"""In-process bus connection used for embedding and tests."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import BusError, BusErrorCode
from .models import BusSignal, SignalKind, ValidationError, validate_interface_name, validate_object_path

logger = logging.getLogger(__name__)


@dataclass
class InMemorySlot:
    """Registration handle returned by ``InMemoryBus.add_object_vtable``."""

    bus: InMemoryBus
    path: str
    interface: str
    closed: bool = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.bus._remove_vtable(self.path, self.interface)


@dataclass
class InMemoryBus:
    """Lock-serialized connection that records every broadcast it sends."""

    signals: list[BusSignal] = field(default_factory=list)
    _vtables: dict[tuple[str, str], dict[str, Any]] = field(default_factory=dict, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _closed: bool = field(default=False, init=False)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._vtables.clear()

    def add_object_vtable(self, path: str, interface: str, vtable: Mapping[str, Any]) -> InMemorySlot:
        self._validate(path, interface)
        with self._lock:
            self._ensure_open()
            key = (path, interface)
            if key in self._vtables:
                raise BusError(
                    BusErrorCode.ALREADY_REGISTERED,
                    f"interface {interface} already registered at {path}",
                )
            self._vtables[key] = dict(vtable)
        logger.debug(
            "dbus_vtable_registered",
            extra={"event": "vtable_registered", "path": path, "interface": interface},
        )
        return InMemorySlot(bus=self, path=path, interface=interface)

    def registered_interfaces(self, path: str) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(interface for registered_path, interface in self._vtables if registered_path == path))

    def vtable(self, path: str, interface: str) -> dict[str, Any]:
        with self._lock:
            try:
                return dict(self._vtables[(path, interface)])
            except KeyError:
                raise BusError(
                    BusErrorCode.NOT_REGISTERED,
                    f"interface {interface} is not registered at {path}",
                ) from None

    def emit_object_added(self, path: str) -> None:
        self._record(SignalKind.OBJECT_ADDED, path, None)

    def emit_object_removed(self, path: str) -> None:
        self._record(SignalKind.OBJECT_REMOVED, path, None)

    def emit_interfaces_added(self, path: str, interfaces: Iterable[str]) -> None:
        self._record(SignalKind.INTERFACES_ADDED, path, tuple(interfaces))

    def emit_interfaces_removed(self, path: str, interfaces: Iterable[str]) -> None:
        self._record(SignalKind.INTERFACES_REMOVED, path, tuple(interfaces))

    def signals_for(self, path: str) -> list[BusSignal]:
        with self._lock:
            return [signal for signal in self.signals if signal.path == path]

    def _record(self, kind: SignalKind, path: str, interfaces: tuple[str, ...] | None) -> None:
        self._validate(path, *(interfaces or ()))
        with self._lock:
            self._ensure_open()
            if interfaces is None:
                # whole-object broadcasts carry everything registered at the path
                interfaces = tuple(sorted(iface for registered_path, iface in self._vtables if registered_path == path))
            signal = BusSignal(kind=kind, path=path, interfaces=interfaces)
            self.signals.append(signal)
        logger.debug(
            "dbus_signal_sent",
            extra={"event": "signal", "kind": kind.value, "path": path, "interfaces": list(interfaces)},
        )

    def _remove_vtable(self, path: str, interface: str) -> None:
        with self._lock:
            self._vtables.pop((path, interface), None)
        logger.debug(
            "dbus_vtable_removed",
            extra={"event": "vtable_removed", "path": path, "interface": interface},
        )

    def _ensure_open(self) -> None:
        if self._closed:
            raise BusError(BusErrorCode.CONNECTION_CLOSED, "bus connection is closed")

    @staticmethod
    def _validate(path: str, *interfaces: str) -> None:
        try:
            validate_object_path(path)
            for interface in interfaces:
                validate_interface_name(interface)
        except ValidationError as exc:
            raise BusError(BusErrorCode.INVALID_ARGUMENT, str(exc), cause=exc) from exc
