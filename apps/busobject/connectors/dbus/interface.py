"""Base class for a single interface binding placed at an object path."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping

from .errors import map_bus_error
from .interfaces import BusConnection, SlotHandle
from .models import validate_interface_name

logger = logging.getLogger(__name__)


class ServerInterface:
    """Registers one interface's vtable on construction.

    Subclasses set ``INTERFACE`` and describe their members in ``vtable()``.
    Several bindings are grouped into one bus object by
    ``runtime.object.ServerObject``.
    """

    INTERFACE: ClassVar[str] = ""

    def __init__(self, connection: BusConnection, path: str) -> None:
        self.interface = validate_interface_name(self.INTERFACE)
        self._connection = connection
        self._path = path
        try:
            self._slot: SlotHandle | None = connection.add_object_vtable(path, self.interface, self.vtable())
        except Exception as exc:
            raise map_bus_error(exc) from exc

    @property
    def path(self) -> str:
        return self._path

    @property
    def connection(self) -> BusConnection:
        return self._connection

    @property
    def registered(self) -> bool:
        return self._slot is not None

    def vtable(self) -> Mapping[str, Any]:
        return {}

    def emit_added(self) -> None:
        try:
            self._connection.emit_interfaces_added(self._path, [self.interface])
        except Exception as exc:
            raise map_bus_error(exc) from exc

    def emit_removed(self) -> None:
        try:
            self._connection.emit_interfaces_removed(self._path, [self.interface])
        except Exception as exc:
            raise map_bus_error(exc) from exc

    def close(self) -> None:
        slot, self._slot = self._slot, None
        if slot is None:
            return
        slot.close()
        logger.debug(
            "dbus_interface_released",
            extra={"event": "interface_released", "path": self._path, "interface": self.interface},
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(interface={self.interface!r}, path={self._path!r})"
