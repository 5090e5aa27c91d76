"""Config schema and accessor."""

from __future__ import annotations

import os
from typing import Any

from loguru import logger

from mediator.core.constants import DEFAULT_MAX_DELTA_DEPTH
from mediator.core.errors import MediatorConfigurationError

# Values used when the config file leaves a key out
CONFIG_DEFAULTS: dict[str, Any] = {
    "listeners": {},
    "max_delta_depth": DEFAULT_MAX_DELTA_DEPTH,
    "delta_notifications": True,
}

# Env keys that override config (loaded once per reload)
_ENV_OVERRIDE_KEYS = (
    "MEDIATOR_MAX_DELTA_DEPTH",
    "MEDIATOR_DELTA_NOTIFICATIONS",
)


def _load_env_overrides() -> dict[str, str]:
    return {k: os.environ.get(k, "") for k in _ENV_OVERRIDE_KEYS}


def _parse_bool_env(val: str) -> bool | None:
    """Parse env string to bool; None if not a recognized bool."""
    v = val.lower()
    if v in ("1", "true", "yes"):
        return True
    if v in ("0", "false", "no"):
        return False
    return None


class Config:
    """Typed accessor over loaded config data, with env overrides."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}
        self._env: dict[str, str] = _load_env_overrides()

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data and re-read env overrides."""
        self._data = data or {}
        self._env = _load_env_overrides()
        if validate:
            self._validate()
        logger.debug("Config reloaded: {} listener event(s)", len(self.listeners))

    def _validate(self) -> None:
        """Validate config structure; raise MediatorConfigurationError on failure."""
        listeners = self._data.get("listeners")
        if listeners is not None and not isinstance(listeners, dict):
            raise MediatorConfigurationError(
                "listeners must be a mapping of event name to identifier(s)",
                code="invalid_listeners",
                details={"type": type(listeners).__name__},
            )
        for event_name, value in (listeners or {}).items():
            values = value if isinstance(value, list) else [value]
            if not all(isinstance(v, str) and v for v in values):
                raise MediatorConfigurationError(
                    f"listeners[{event_name!r}] must be an identifier or a list of identifiers",
                    code="invalid_listener_identifier",
                    details={"event_name": event_name},
                )
        raw_depth = self._data.get("max_delta_depth", DEFAULT_MAX_DELTA_DEPTH)
        if isinstance(raw_depth, bool) or not isinstance(raw_depth, int):
            raise MediatorConfigurationError(
                "max_delta_depth must be an integer",
                code="invalid_max_delta_depth",
                details={"type": type(raw_depth).__name__},
            )
        try:
            depth = self.max_delta_depth
        except ValueError as exc:
            raise MediatorConfigurationError(
                "MEDIATOR_MAX_DELTA_DEPTH must be an integer",
                code="invalid_max_delta_depth",
                original_error=exc,
            ) from exc
        if depth < 1:
            raise MediatorConfigurationError(
                "max_delta_depth must be at least 1",
                code="invalid_max_delta_depth",
                details={"value": depth},
            )

        notifications = self._data.get("delta_notifications", True)
        if not isinstance(notifications, bool):
            raise MediatorConfigurationError(
                "delta_notifications must be true or false",
                code="invalid_delta_notifications",
                details={"type": type(notifications).__name__},
            )

    @property
    def listeners(self) -> dict[str, str | list[str]]:
        """Event name -> listener identifier(s) to push at startup."""
        m = self._data.get("listeners")
        return m if isinstance(m, dict) else {}

    @property
    def max_delta_depth(self) -> int:
        env_val = self._env.get("MEDIATOR_MAX_DELTA_DEPTH", "").strip()
        if env_val:
            return int(env_val)
        return int(self._data.get("max_delta_depth", DEFAULT_MAX_DELTA_DEPTH))

    @property
    def delta_notifications(self) -> bool:
        parsed = _parse_bool_env(self._env.get("MEDIATOR_DELTA_NOTIFICATIONS", ""))
        if parsed is not None:
            return parsed
        val = self._data.get("delta_notifications", True)
        if isinstance(val, str):
            parsed = _parse_bool_env(val)
            return True if parsed is None else parsed
        return bool(val)


cfg: Config = Config({})
