"""Configuration loading and schema definitions."""

from highlight_cli.config.loader import load_config
from highlight_cli.config.schema import Config, GlobalConfig, Preset, PresetRule

__all__ = [
    "Config",
    "GlobalConfig",
    "Preset",
    "PresetRule",
    "load_config",
]
