"""Lifecycle enums for composed bus objects."""

from __future__ import annotations

from enum import Enum


class Action(str, Enum):
    """What a ``ServerObject`` broadcasts when it is constructed."""

    EMIT_OBJECT_ADDED = "emit_object_added"
    EMIT_INTERFACE_ADDED = "emit_interface_added"
    DEFER_EMIT = "defer_emit"

    @classmethod
    def from_defer_signal(cls, defer_signal: bool) -> "Action":
        """Map the legacy ``deferSignal`` flag onto an action."""

        return cls.DEFER_EMIT if defer_signal else cls.EMIT_OBJECT_ADDED


class ObjectPhase(str, Enum):
    UNINITIALIZED = "uninitialized"
    ADDED_EMITTED = "added_emitted"
    ADDED_DEFERRED = "added_deferred"
    INTERFACE_ONLY_ANNOUNCED = "interface_only_announced"
    DESTROYED = "destroyed"
    MOVED = "moved"


_PHASE_AFTER_ACTION: dict[Action, ObjectPhase] = {
    Action.EMIT_OBJECT_ADDED: ObjectPhase.ADDED_EMITTED,
    Action.EMIT_INTERFACE_ADDED: ObjectPhase.INTERFACE_ONLY_ANNOUNCED,
    Action.DEFER_EMIT: ObjectPhase.ADDED_DEFERRED,
}


def phase_after(action: Action) -> ObjectPhase:
    """Phase a freshly constructed object settles in for ``action``."""

    return _PHASE_AFTER_ACTION[action]
