"""Bus object composition and lifecycle primitives."""

from .composition import BindingFactory, Composition, CompositionBuilder
from .config import ObjectServerConfig
from .errors import (
    ConstructionFailure,
    EmissionFailure,
    ObjectErrorCode,
    ObjectLifecycleError,
    ObjectUnavailableError,
    TeardownEmissionFailure,
)
from .models import Action, ObjectPhase
from .object import ObjectLifecycleState, ServerObject, TeardownReporter, log_teardown_failure

__all__ = [
    "Action",
    "BindingFactory",
    "Composition",
    "CompositionBuilder",
    "ConstructionFailure",
    "EmissionFailure",
    "ObjectErrorCode",
    "ObjectLifecycleError",
    "ObjectLifecycleState",
    "ObjectPhase",
    "ObjectServerConfig",
    "ObjectUnavailableError",
    "ServerObject",
    "TeardownEmissionFailure",
    "TeardownReporter",
    "log_teardown_failure",
]
