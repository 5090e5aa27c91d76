"""Configuration: YAML + env overlay."""

from mediator.config.loader import load_config, load_config_with_env
from mediator.config.schema import CONFIG_DEFAULTS, Config, cfg

__all__ = ["CONFIG_DEFAULTS", "Config", "cfg", "load_config", "load_config_with_env"]
