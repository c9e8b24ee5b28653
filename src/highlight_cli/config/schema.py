"""Pydantic models for configuration schema."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from highlight_cli.core.color import DEFAULT_WORD_COLOR


class GlobalConfig(BaseModel):
    """Global configuration options."""

    color: bool = Field(default=True, description="Enable/disable colors")
    default_color: str = Field(default="", description="Color for lines no line rule fires on")
    word_color: str = Field(
        default=DEFAULT_WORD_COLOR,
        description="Color of patterns given before any -w/-l/-lx flag",
    )


class PresetRule(BaseModel):
    """One rule of a preset: either a line rule or a word rule."""

    line: str | None = Field(default=None, description="Line color; makes this a line rule")
    word: str | None = Field(default=None, description="Word color; makes this a word rule")
    inverse: bool = Field(default=False, description="Fire on lines matching none of the patterns")
    patterns: list[str] = Field(default_factory=list, description="Regex patterns")

    @field_validator("patterns", mode="before")
    @classmethod
    def parse_patterns(cls, v: str | list[str] | None) -> list[str]:
        """Accept a single pattern as shorthand for a one-element list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @model_validator(mode="after")
    def check_kind(self) -> PresetRule:
        if (self.line is None) == (self.word is None):
            raise ValueError("a preset rule needs exactly one of 'line' or 'word'")
        if self.inverse and self.line is None:
            raise ValueError("'inverse' is only valid for line rules")
        return self

    @property
    def is_line_rule(self) -> bool:
        return self.line is not None


class Preset(BaseModel):
    """Named list of rules selectable with --preset."""

    name: str = Field(description="Preset name, e.g., 'gotest'")
    description: str = Field(default="", description="Shown by --list-presets")
    rules: list[PresetRule] = Field(default_factory=list)


class Config(BaseModel):
    """Top-level configuration."""

    config: GlobalConfig = Field(default_factory=GlobalConfig)
    colors: dict[str, str] = Field(
        default_factory=dict, description="Color alias name to color spec mapping"
    )
    presets: dict[str, Preset] = Field(default_factory=dict)

    @field_validator("colors", mode="before")
    @classmethod
    def parse_colors(cls, v: dict[str, Any] | None) -> dict[str, str]:
        """Lowercase alias names."""
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("colors must be a mapping of alias names to colors")
        return {str(name).lower(): str(spec) for name, spec in v.items()}

    @field_validator("presets", mode="before")
    @classmethod
    def parse_presets(cls, v: dict[str, Any] | None) -> dict[str, Preset]:
        """Parse preset definitions.

        A preset is either a list of rules or a mapping with ``rules`` and
        an optional ``description``.
        """
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("presets must be a mapping of preset names")
        result = {}
        for name, data in v.items():
            name = str(name)
            if isinstance(data, list):
                result[name.lower()] = Preset(name=name, rules=data)
            elif isinstance(data, dict):
                result[name.lower()] = Preset.model_validate({**data, "name": name})
            else:
                raise ValueError(f"preset {name!r} must be a list of rules or a mapping")
        return result

    def get_preset(self, name: str) -> Preset:
        """Get a preset by name.

        Raises:
            KeyError: If no preset has that name
        """
        try:
            return self.presets[name.lower()]
        except KeyError:
            known = ", ".join(sorted(self.presets)) or "none"
            raise KeyError(f"No such preset: {name!r} (available: {known})") from None
