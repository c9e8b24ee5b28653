"""Pytest configuration and fixtures."""

from collections.abc import Callable

import pytest

from highlight_cli.config import loader
from highlight_cli.config.loader import load_config_from_string
from highlight_cli.config.schema import Config
from highlight_cli.core.rules import LineRule, Pattern, WordRule


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's real configuration."""
    monkeypatch.setattr(loader, "DEFAULT_CONFIG_PATH", tmp_path / "config.yaml")
    monkeypatch.setattr(loader, "DEFAULT_DROPIN_DIR", tmp_path / "conf.d")


@pytest.fixture
def word_rule() -> Callable[..., WordRule]:
    """Factory for word rules: word_rule(color, *patterns)."""

    def make(color: bytes, *patterns: str) -> WordRule:
        return WordRule(color=color, patterns=tuple(Pattern.compile(p) for p in patterns))

    return make


@pytest.fixture
def line_rule() -> Callable[..., LineRule]:
    """Factory for line rules: line_rule(color, *patterns, inverse=False)."""

    def make(color: bytes, *patterns: str, inverse: bool = False) -> LineRule:
        return LineRule(
            color=color,
            patterns=tuple(Pattern.compile(p) for p in patterns),
            inverse=inverse,
        )

    return make


@pytest.fixture
def sample_config() -> Config:
    """Sample configuration for testing."""
    yaml_content = """
config:
  color: true
  default_color: ""
  word_color: "cyan"

colors:
  Error: "red+b"
  dim: "white+d"

presets:
  build:
    description: "Compiler output"
    rules:
      - line: error
        patterns: ["error:"]
      - line: yellow
        patterns: "warning:"
      - word: green
        patterns: ["\\\\bok\\\\b"]
  quiet:
    - line: dim
      inverse: true
      patterns: ["error", "warning"]
"""
    return load_config_from_string(yaml_content)


@pytest.fixture
def empty_config() -> Config:
    """Empty configuration for testing."""
    return Config()
