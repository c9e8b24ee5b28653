"""Configuration loader with support for drop-in directories."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from highlight_cli.config.defaults import DEFAULT_CONFIG_YAML
from highlight_cli.config.schema import Config

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "highlight" / "config.yaml"
DEFAULT_DROPIN_DIR = Path.home() / ".config" / "highlight" / "conf.d"


class ConfigError(ValueError):
    """Raised when a configuration document is not a mapping."""


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        elif key in result and isinstance(result[key], list) and isinstance(value, list):
            # For lists, extend rather than replace
            result[key] = result[key] + value
        else:
            result[key] = value

    return result


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found."""
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not data:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def load_dropin_directory(dropin_dir: Path) -> dict[str, Any]:
    """Load and merge all YAML files from drop-in directory."""
    if not dropin_dir.exists():
        return {}

    result: dict[str, Any] = {}
    yaml_files = sorted(dropin_dir.glob("*.yaml")) + sorted(dropin_dir.glob("*.yml"))

    for yaml_file in yaml_files:
        result = deep_merge(result, load_yaml_file(yaml_file))

    return result


def load_config(
    config_path: Path | str | None = None,
    dropin_dir: Path | str | None = None,
) -> Config:
    """Load the built-in defaults, then the config file, then drop-ins.

    Args:
        config_path: Path to main config file (default: ~/.config/highlight/config.yaml)
        dropin_dir: Path to drop-in directory (default: ~/.config/highlight/conf.d/)

    Returns:
        Merged configuration object
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    dropin_dir = Path(dropin_dir) if dropin_dir is not None else DEFAULT_DROPIN_DIR

    merged_data = yaml.safe_load(DEFAULT_CONFIG_YAML)
    merged_data = deep_merge(merged_data, load_yaml_file(config_path))
    merged_data = deep_merge(merged_data, load_dropin_directory(dropin_dir))

    return Config.model_validate(merged_data)


def load_config_from_string(yaml_string: str) -> Config:
    """Load configuration from a YAML string (useful for testing)."""
    data = yaml.safe_load(yaml_string) or {}
    if not isinstance(data, dict):
        raise ConfigError("top level must be a mapping")
    return Config.model_validate(data)
