"""D-Bus style connection package."""

from .bus import InMemoryBus, InMemorySlot
from .errors import BusError, BusErrorCode, map_bus_error
from .interface import ServerInterface
from .interfaces import BusConnection, InterfaceBinding, SlotHandle
from .models import (
    BusSignal,
    SignalKind,
    ValidationError,
    validate_interface_name,
    validate_object_path,
)

__all__ = [
    "BusConnection",
    "BusError",
    "BusErrorCode",
    "BusSignal",
    "InMemoryBus",
    "InMemorySlot",
    "InterfaceBinding",
    "ServerInterface",
    "SignalKind",
    "SlotHandle",
    "ValidationError",
    "map_bus_error",
    "validate_interface_name",
    "validate_object_path",
]
