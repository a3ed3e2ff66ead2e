"""Configuration model for bus object lifecycles."""

from __future__ import annotations

from dataclasses import dataclass
from os import getenv

from .models import Action

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ObjectServerConfig:
    """Process-wide defaults applied to every ``ServerObject``."""

    default_action: Action = Action.EMIT_OBJECT_ADDED
    validate_paths: bool = True

    @classmethod
    def from_env(cls) -> "ObjectServerConfig":
        """Build config from environment variables."""

        return cls(
            default_action=Action(getenv("BUSOBJECT_DEFAULT_ACTION", Action.EMIT_OBJECT_ADDED.value).strip().lower()),
            validate_paths=getenv("BUSOBJECT_VALIDATE_PATHS", "1").strip().lower() in _TRUTHY,
        )
