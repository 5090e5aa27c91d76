"""Config loading: YAML listener file with .env overlay."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from mediator.core.errors import MediatorConfigurationError


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str | Path) -> dict[str, Any]:
    """Read the YAML file at path with SafeLoader.

    A missing file or a top level that is not a mapping yields {}. Unparsable
    YAML raises MediatorConfigurationError (code "invalid_yaml").
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Config file not found: {}", path)
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        logger.error("Failed to parse config {}: {}", path, exc)
        raise MediatorConfigurationError(
            f"{path} is not valid YAML",
            code="invalid_yaml",
            details={"path": str(path)},
            original_error=exc,
        ) from exc

    if not isinstance(data, dict):
        logger.warning("Config file {} has invalid structure (expected mapping)", path)
        return {}
    return data


def load_config_with_env(path: str | Path, *, defaults: dict[str, Any] | None = None) -> dict[str, Any]:
    """Load .env into the process environment, then the YAML file merged over defaults.

    defaults is deep-copied, so callers may mutate the result freely.
    """
    from dotenv import load_dotenv

    load_dotenv()
    data = load_config(path)
    missing = sorted(set(defaults or {}) - set(data))
    if missing:
        logger.debug("Using defaults for {}", ", ".join(missing))
    return _deep_update(copy.deepcopy(defaults or {}), data)
