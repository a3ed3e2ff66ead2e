"""Lifecycle error taxonomy for composed bus objects."""

from __future__ import annotations

from enum import Enum


class ObjectErrorCode(str, Enum):
    CONSTRUCTION_FAILED = "construction_failed"
    EMISSION_FAILED = "emission_failed"
    TEARDOWN_EMISSION_FAILED = "teardown_emission_failed"
    OBJECT_MOVED = "object_moved"
    OBJECT_DESTROYED = "object_destroyed"


class ObjectLifecycleError(Exception):
    """Base error for anything that goes wrong around a bus object's lifetime."""

    def __init__(
        self,
        code: ObjectErrorCode,
        message: str,
        *,
        path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.path = path
        self.cause = cause


class ConstructionFailure(ObjectLifecycleError):
    """The object never became valid; anything already built was rolled back."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        cause: Exception | None = None,
        failed_index: int | None = None,
    ):
        super().__init__(ObjectErrorCode.CONSTRUCTION_FAILED, message, path=path, cause=cause)
        self.failed_index = failed_index


class EmissionFailure(ObjectLifecycleError):
    """An explicit "object added" broadcast failed; it may be retried."""

    def __init__(self, message: str, *, path: str | None = None, cause: Exception | None = None):
        super().__init__(ObjectErrorCode.EMISSION_FAILED, message, path=path, cause=cause)


class TeardownEmissionFailure(ObjectLifecycleError):
    """Reported, never raised: the "object removed" broadcast failed at destruction."""

    def __init__(self, message: str, *, path: str | None = None, cause: Exception | None = None):
        super().__init__(ObjectErrorCode.TEARDOWN_EMISSION_FAILED, message, path=path, cause=cause)


class ObjectUnavailableError(ObjectLifecycleError):
    """The handle was moved from or already destroyed."""
