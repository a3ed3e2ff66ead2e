"""Ordered construction of the interface bindings that make up one bus object."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Callable, TypeVar

from connectors.dbus.interfaces import BusConnection, InterfaceBinding

from .errors import ConstructionFailure

logger = logging.getLogger(__name__)

BindingFactory = Callable[[BusConnection, str], InterfaceBinding]

B = TypeVar("B")


def factory_name(factory: BindingFactory) -> str:
    return getattr(factory, "__qualname__", None) or getattr(factory, "__name__", None) or repr(factory)


@dataclass(frozen=True, slots=True)
class Composition:
    """Bindings sharing one connection and path, in construction order."""

    connection: BusConnection
    path: str
    bindings: tuple[InterfaceBinding, ...] = ()

    def __iter__(self) -> Iterator[InterfaceBinding]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    @property
    def interfaces(self) -> tuple[str, ...]:
        return tuple(getattr(binding, "interface", type(binding).__name__) for binding in self.bindings)

    def find(self, kind: type[B]) -> B | None:
        for binding in self.bindings:
            if isinstance(binding, kind):
                return binding
        return None

    def emit_added(self) -> None:
        """Announce every binding individually, in construction order."""

        for binding in self.bindings:
            binding.emit_added()

    def close(self) -> None:
        """Release bindings in reverse construction order. Never raises."""

        release_bindings(self.bindings, path=self.path)


def release_bindings(bindings: Iterable[InterfaceBinding], *, path: str) -> None:
    for binding in reversed(tuple(bindings)):
        try:
            binding.close()
        except Exception:  # noqa: BLE001 - teardown keeps going past one bad binding
            logger.error(
                "dbus_binding_release_failed",
                extra={"event": "binding_release_failed", "path": path, "binding": repr(binding)},
                exc_info=True,
            )


class CompositionBuilder:
    """Builds bindings one after another; all of them or none of them."""

    def __init__(self, factories: Iterable[BindingFactory] = ()) -> None:
        self._factories: tuple[BindingFactory, ...] = tuple(factories)

    @property
    def factories(self) -> tuple[BindingFactory, ...]:
        return self._factories

    def build(self, connection: BusConnection, path: str) -> Composition:
        built: list[InterfaceBinding] = []
        for index, factory in enumerate(self._factories):
            try:
                built.append(factory(connection, path))
            except BaseException as exc:
                logger.warning(
                    "dbus_composition_rollback",
                    extra={
                        "event": "composition_rollback",
                        "path": path,
                        "failed_index": index,
                        "factory": factory_name(factory),
                        "rolled_back": len(built),
                    },
                )
                release_bindings(built, path=path)
                if not isinstance(exc, Exception):
                    raise
                raise ConstructionFailure(
                    f"binding {index} ({factory_name(factory)}) failed at {path}: {exc}",
                    path=path,
                    cause=exc,
                    failed_index=index,
                ) from exc

        logger.debug(
            "dbus_composition_built",
            extra={"event": "composition_built", "path": path, "bindings": len(built)},
        )
        return Composition(connection=connection, path=path, bindings=tuple(built))
