"""Line and word rules and the builder that assembles them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto


class PatternError(ValueError):
    """Raised when a pattern does not compile."""

    def __init__(self, source: str, error: re.error) -> None:
        super().__init__(f"Bad matching pattern {source!r}: {error}")
        self.source = source
        self.error = error


@dataclass(frozen=True)
class Pattern:
    """A compiled bytes regex plus the string it was compiled from."""

    source: str
    regex: re.Pattern[bytes] = field(compare=False, repr=False)

    @classmethod
    def compile(cls, source: str) -> Pattern:
        """Compile a pattern given on the command line or in a preset.

        Raises:
            PatternError: If the regex is invalid
        """
        try:
            regex = re.compile(source.encode("utf-8", "surrogateescape"))
        except re.error as e:
            raise PatternError(source, e) from e
        return cls(source=source, regex=regex)

    def search(self, line: bytes) -> bool:
        """Check whether the pattern matches anywhere in the line."""
        return self.regex.search(line) is not None

    def spans(self, line: bytes) -> list[tuple[int, int]]:
        """All non-overlapping match ranges, left to right."""
        return [m.span() for m in self.regex.finditer(line)]


@dataclass(frozen=True)
class WordRule:
    """Colors the substrings matching any of its patterns."""

    color: bytes
    patterns: tuple[Pattern, ...] = ()


@dataclass(frozen=True)
class LineRule:
    """Colors whole lines matching (or, if inverse, not matching) its patterns."""

    color: bytes
    patterns: tuple[Pattern, ...] = ()
    inverse: bool = False

    def fires(self, line: bytes) -> bool:
        """Check whether this rule selects its color for the line.

        An inverse rule fires only when none of its patterns match.
        """
        matched = any(pattern.search(line) for pattern in self.patterns)
        return matched != self.inverse


@dataclass(frozen=True)
class RuleSet:
    """Immutable rules applied to every line of the stream."""

    line_rules: tuple[LineRule, ...] = ()
    word_rules: tuple[WordRule, ...] = ()
    default_color: bytes = b""


class BuildState(Enum):
    """Which kind of rule is currently receiving patterns."""

    NONE = auto()
    WORD = auto()
    LINE = auto()


class RuleBuilder:
    """Accumulates rules in declaration order.

    Patterns attach to the most recently opened rule. Adding a pattern
    while no rule is open opens a word rule with ``implicit_color``.
    """

    def __init__(self, implicit_color: bytes) -> None:
        self.implicit_color = implicit_color
        self.state = BuildState.NONE
        self.default_color = b""
        self._line_rules: list[LineRule] = []
        self._word_rules: list[WordRule] = []
        self._color = b""
        self._inverse = False
        self._patterns: list[Pattern] = []

    def open_word_rule(self, color: bytes) -> None:
        self.close_rule()
        self.state = BuildState.WORD
        self._color = color

    def open_line_rule(self, color: bytes, inverse: bool = False) -> None:
        self.close_rule()
        self.state = BuildState.LINE
        self._color = color
        self._inverse = inverse

    def set_default_color(self, color: bytes) -> None:
        """Set the color of lines no line rule fires on (last call wins)."""
        self.default_color = color

    def add_pattern(self, pattern: Pattern | str) -> None:
        """Attach a pattern to the open rule.

        Raises:
            PatternError: If a string pattern does not compile
        """
        if isinstance(pattern, str):
            pattern = Pattern.compile(pattern)
        if self.state is BuildState.NONE:
            self.open_word_rule(self.implicit_color)
        self._patterns.append(pattern)

    def close_rule(self) -> None:
        """Move the open rule, if any, into the finished lists."""
        patterns = tuple(self._patterns)
        if self.state is BuildState.WORD:
            self._word_rules.append(WordRule(color=self._color, patterns=patterns))
        elif self.state is BuildState.LINE:
            self._line_rules.append(
                LineRule(color=self._color, patterns=patterns, inverse=self._inverse)
            )
        self.state = BuildState.NONE
        self._color = b""
        self._inverse = False
        self._patterns = []

    def build(self) -> RuleSet:
        """Close the open rule and return the frozen rule set."""
        self.close_rule()
        return RuleSet(
            line_rules=tuple(self._line_rules),
            word_rules=tuple(self._word_rules),
            default_color=self.default_color,
        )
