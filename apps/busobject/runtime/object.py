"""Composed bus objects and their added/removed broadcast lifecycle."""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, TypeVar

from connectors.dbus.interfaces import BusConnection, InterfaceBinding
from connectors.dbus.models import ValidationError, validate_object_path

from .composition import BindingFactory, Composition, CompositionBuilder, factory_name
from .config import ObjectServerConfig
from .errors import (
    ConstructionFailure,
    EmissionFailure,
    ObjectErrorCode,
    ObjectUnavailableError,
    TeardownEmissionFailure,
)
from .models import Action, ObjectPhase, phase_after

logger = logging.getLogger(__name__)

TeardownReporter = Callable[[TeardownEmissionFailure], None]

B = TypeVar("B")
S = TypeVar("S", bound="ServerObject")


def log_teardown_failure(failure: TeardownEmissionFailure) -> None:
    """Default teardown reporter: one error record, nothing raised."""

    cause = failure.cause
    logger.error(
        "dbus_teardown_emission_failed",
        extra={"event": "teardown_emission_failed", "path": failure.path, "code": failure.code.value},
        exc_info=(type(cause), cause, cause.__traceback__) if cause is not None else None,
    )


@dataclass(slots=True)
class ObjectLifecycleState:
    """Everything a bus object owns. Moves hand this over wholesale."""

    composition: Composition
    action: Action
    added_emitted: bool = False
    phase: ObjectPhase = ObjectPhase.UNINITIALIZED

    @property
    def connection(self) -> BusConnection:
        return self.composition.connection

    @property
    def path(self) -> str:
        return self.composition.path

    def apply_action(self) -> None:
        if self.action is Action.EMIT_OBJECT_ADDED:
            self.emit_object_added()
        elif self.action is Action.EMIT_INTERFACE_ADDED:
            self.composition.emit_added()
            logger.info(
                "dbus_interfaces_announced",
                extra={"event": "interfaces_announced", "path": self.path, "interfaces": list(self.composition.interfaces)},
            )
        self.phase = phase_after(self.action)

    def emit_object_added(self) -> None:
        if self.added_emitted:
            return
        try:
            self.connection.emit_object_added(self.path)
        except Exception as exc:
            raise EmissionFailure(
                f"object added broadcast failed at {self.path}: {exc}",
                path=self.path,
                cause=exc,
            ) from exc
        self.added_emitted = True
        self.phase = ObjectPhase.ADDED_EMITTED
        logger.info(
            "dbus_object_added_emitted",
            extra={"event": "object_added", "path": self.path, "interfaces": list(self.composition.interfaces)},
        )

    def destroy(self, reporter: TeardownReporter) -> None:
        """Runs at most once; reports failures instead of raising them."""

        if self.phase is ObjectPhase.DESTROYED:
            return
        self.phase = ObjectPhase.DESTROYED
        try:
            if self.added_emitted:
                self._emit_object_removed(reporter)
        finally:
            self.composition.close()

    def _emit_object_removed(self, reporter: TeardownReporter) -> None:
        try:
            self.connection.emit_object_removed(self.path)
        except Exception as exc:  # noqa: BLE001 - destruction must not raise
            failure = TeardownEmissionFailure(
                f"object removed broadcast failed at {self.path}: {exc}",
                path=self.path,
                cause=exc,
            )
            try:
                reporter(failure)
            except Exception:  # noqa: BLE001
                logger.error(
                    "dbus_teardown_reporter_failed",
                    extra={"event": "teardown_reporter_failed", "path": self.path},
                    exc_info=True,
                )
            return
        logger.info(
            "dbus_object_removed_emitted",
            extra={"event": "object_removed", "path": self.path},
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "action": self.action.value,
            "phase": self.phase.value,
            "added_emitted": self.added_emitted,
            "interfaces": list(self.composition.interfaces),
        }


def _resolve_action(action: Action | bool | str | None, config: ObjectServerConfig) -> Action:
    if action is None:
        return config.default_action
    if isinstance(action, bool):
        return Action.from_defer_signal(action)
    return Action(action)


class ServerObject:
    """A single bus object grouping any number of interface bindings.

    Bindings listed in ``interfaces`` are built in order at ``path`` on
    ``connection``. Depending on ``action`` the object then broadcasts
    "object added" right away, announces each interface on its own, or waits
    for an explicit ``emit_object_added()``. Passing a ``bool`` keeps the old
    ``defer_signal`` meaning (``True`` defers, ``False`` emits).

    The object is move-only: ``transfer()`` and ``adopt()`` hand its bindings
    and broadcast state to another handle, copies are refused. When the object
    goes out of scope (end of a ``with`` block, or garbage collection) an
    "object removed" broadcast is sent if, and only if, "object added" was.
    """

    interfaces: ClassVar[tuple[BindingFactory, ...]] = ()

    def __init__(
        self,
        connection: BusConnection,
        path: str,
        action: Action | bool | str | None = None,
        *,
        config: ObjectServerConfig | None = None,
        reporter: TeardownReporter | None = None,
    ) -> None:
        try:
            resolved_config = config or ObjectServerConfig.from_env()
            resolved_action = _resolve_action(action, resolved_config)
        except ValueError as exc:
            raise ConstructionFailure(f"invalid action at {path}: {exc}", path=path, cause=exc) from exc
        if resolved_config.validate_paths:
            try:
                validate_object_path(path)
            except ValidationError as exc:
                raise ConstructionFailure(str(exc), path=path, cause=exc) from exc

        composition = CompositionBuilder(self.interfaces).build(connection, path)
        state = ObjectLifecycleState(composition=composition, action=resolved_action)
        try:
            state.apply_action()
        except BaseException as exc:
            composition.close()
            if not isinstance(exc, Exception):
                raise
            raise ConstructionFailure(
                f"{resolved_action.value} failed at {path}: {exc}",
                path=path,
                cause=exc,
            ) from exc

        self._bind(state, reporter or log_teardown_failure)

    @classmethod
    def compose(cls: type[S], *factories: BindingFactory, name: str | None = None) -> type[S]:
        """Return a subclass fixed to ``factories``, built in the given order."""

        class_name = name or f"{cls.__name__}[{', '.join(factory_name(factory) for factory in factories)}]"
        return type(class_name, (cls,), {"interfaces": tuple(factories), "__module__": cls.__module__})

    @property
    def connection(self) -> BusConnection:
        return self._require_state().connection

    @property
    def path(self) -> str:
        return self._require_state().path

    @property
    def action(self) -> Action:
        return self._require_state().action

    @property
    def added_emitted(self) -> bool:
        return self._state is not None and self._state.added_emitted

    @property
    def phase(self) -> ObjectPhase:
        if self._state is None:
            return ObjectPhase.MOVED
        return self._state.phase

    @property
    def bindings(self) -> tuple[InterfaceBinding, ...]:
        return self._require_state().composition.bindings

    def emit_object_added(self) -> None:
        """Broadcast "object added" unless it already went out."""

        self._require_state().emit_object_added()

    def transfer(self: S) -> S:
        """Move construction: a new handle takes over, this one goes inert."""

        state = self._release()
        target = type(self).__new__(type(self))
        target._bind(state, self._reporter)
        return target

    def adopt(self: S, source: S) -> S:
        """Move assignment: drop what this handle owns, then take over ``source``."""

        if source is self:
            return self
        if type(source) is not type(self):
            raise TypeError(f"cannot move {type(source).__name__} into {type(self).__name__}")
        source._require_state()
        self._finalizer()
        state = source._release()
        self._bind(state, source._reporter)
        return self

    def snapshot(self) -> dict[str, Any]:
        if self._state is None:
            return {"phase": ObjectPhase.MOVED.value, "added_emitted": False}
        return self._state.to_payload()

    def __getitem__(self, kind: type[B]) -> B:
        binding = self._require_state().composition.find(kind)
        if binding is None:
            raise KeyError(kind)
        return binding

    def __enter__(self: S) -> S:
        self._require_state()
        return self

    def __exit__(self, exc_type: object, exc_value: object, exc_traceback: object) -> None:
        self._finalizer()

    def __copy__(self) -> ServerObject:
        raise TypeError(f"{type(self).__name__} is move-only; use transfer()")

    def __deepcopy__(self, memo: dict[int, Any]) -> ServerObject:
        raise TypeError(f"{type(self).__name__} is move-only; use transfer()")

    def __reduce_ex__(self, protocol: object) -> Any:
        raise TypeError(f"{type(self).__name__} cannot be pickled")

    def __repr__(self) -> str:
        if self._state is None:
            return f"<{type(self).__name__} moved>"
        return f"<{type(self).__name__} path={self._state.path!r} phase={self._state.phase.value}>"

    def _bind(self, state: ObjectLifecycleState, reporter: TeardownReporter) -> None:
        self._state: ObjectLifecycleState | None = state
        self._reporter = reporter
        self._finalizer = weakref.finalize(self, state.destroy, reporter)

    def _release(self) -> ObjectLifecycleState:
        state = self._require_state()
        self._finalizer.detach()
        self._state = None
        logger.debug(
            "dbus_object_moved",
            extra={"event": "object_moved", "path": state.path},
        )
        return state

    def _require_state(self) -> ObjectLifecycleState:
        state = self._state
        if state is None:
            raise ObjectUnavailableError(ObjectErrorCode.OBJECT_MOVED, "bus object was moved from")
        if state.phase is ObjectPhase.DESTROYED:
            raise ObjectUnavailableError(
                ObjectErrorCode.OBJECT_DESTROYED,
                f"bus object at {state.path} was destroyed",
                path=state.path,
            )
        return state
