"""Core functionality: colors, rules, rendering and stream writers."""

from highlight_cli.core.color import ColorError, ColorParser, parse_color, resolve_color
from highlight_cli.core.colorizer import (
    apply_word_rules,
    find_spans,
    pick_line_color,
    render_line,
)
from highlight_cli.core.rules import (
    LineRule,
    Pattern,
    PatternError,
    RuleBuilder,
    RuleSet,
    WordRule,
)
from highlight_cli.core.stream import (
    ColorizerWriter,
    EscapingWriter,
    LineBoundaryWriter,
    copy_stream,
)

__all__ = [
    "ColorError",
    "ColorParser",
    "parse_color",
    "resolve_color",
    "apply_word_rules",
    "find_spans",
    "pick_line_color",
    "render_line",
    "LineRule",
    "Pattern",
    "PatternError",
    "RuleBuilder",
    "RuleSet",
    "WordRule",
    "ColorizerWriter",
    "EscapingWriter",
    "LineBoundaryWriter",
    "copy_stream",
]
