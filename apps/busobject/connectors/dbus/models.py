"""Typed records and name validation for bus objects."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

MAX_INTERFACE_NAME_LENGTH = 255

_PATH_ELEMENT = re.compile(r"^[A-Za-z0-9_]+$")
_INTERFACE_ELEMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ValidationError(ValueError):
    """Raised when an object path or interface name is malformed."""


class SignalKind(str, Enum):
    OBJECT_ADDED = "object_added"
    OBJECT_REMOVED = "object_removed"
    INTERFACES_ADDED = "interfaces_added"
    INTERFACES_REMOVED = "interfaces_removed"


@dataclass(frozen=True)
class BusSignal:
    kind: SignalKind
    path: str
    interfaces: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        return {"kind": self.kind.value, "path": self.path, "interfaces": list(self.interfaces)}


def validate_object_path(path: str) -> str:
    """Return ``path`` unchanged if it is a well-formed object path."""

    if not isinstance(path, str) or not path:
        raise ValidationError("object path must be a non-empty string")
    if not path.startswith("/"):
        raise ValidationError(f"object path must start with '/': {path!r}")
    if path == "/":
        return path
    if path.endswith("/"):
        raise ValidationError(f"object path must not end with '/': {path!r}")
    for element in path[1:].split("/"):
        if not _PATH_ELEMENT.match(element):
            raise ValidationError(f"invalid object path element {element!r} in {path!r}")
    return path


def validate_interface_name(name: str) -> str:
    """Return ``name`` unchanged if it is a well-formed interface name."""

    if not isinstance(name, str) or not name:
        raise ValidationError("interface name must be a non-empty string")
    if len(name) > MAX_INTERFACE_NAME_LENGTH:
        raise ValidationError(f"interface name exceeds {MAX_INTERFACE_NAME_LENGTH} characters")
    elements = name.split(".")
    if len(elements) < 2:
        raise ValidationError(f"interface name needs at least two elements: {name!r}")
    for element in elements:
        if not _INTERFACE_ELEMENT.match(element):
            raise ValidationError(f"invalid interface name element {element!r} in {name!r}")
    return name
