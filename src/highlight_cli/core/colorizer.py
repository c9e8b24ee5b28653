"""Line color selection and word span rendering."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from highlight_cli.core.color import RESET

if TYPE_CHECKING:
    from highlight_cli.core.rules import LineRule, RuleSet, WordRule

NEWLINE = b"\n"


class EventKind(IntEnum):
    """Whether a color starts or stops at an event position."""

    START = 0
    STOP = 1


@dataclass(frozen=True)
class ColorSpan:
    """A half-open byte range colored by one word rule.

    Attributes:
        start: First byte of the match
        end: One past the last byte of the match
        priority: Declaration index of the rule (higher wins on overlap)
        color: The rule's color
    """

    start: int
    end: int
    priority: int
    color: bytes


@dataclass(frozen=True)
class ColorEvent:
    """A color starting or stopping at a byte position."""

    pos: int
    kind: EventKind
    priority: int
    color: bytes


def pick_line_color(line: bytes, rules: Sequence[LineRule], default: bytes) -> bytes:
    """Pick the color for a whole line.

    The first rule that fires wins. Returns ``default`` (possibly empty)
    when no rule fires.
    """
    for rule in rules:
        if rule.fires(line):
            return rule.color
    return default


def find_spans(line: bytes, rules: Sequence[WordRule]) -> list[ColorSpan]:
    """Find every word rule match in the line.

    Zero-width matches are dropped since they cover no text.
    """
    spans: list[ColorSpan] = []
    for priority, rule in enumerate(rules):
        for pattern in rule.patterns:
            for start, end in pattern.spans(line):
                if start < end:
                    spans.append(ColorSpan(start, end, priority, rule.color))
    return spans


def build_events(spans: Sequence[ColorSpan]) -> list[ColorEvent]:
    """Split spans into start/stop events sorted by position."""
    events: list[ColorEvent] = []
    for span in spans:
        events.append(ColorEvent(span.start, EventKind.START, span.priority, span.color))
        events.append(ColorEvent(span.end, EventKind.STOP, span.priority, span.color))
    events.sort(key=lambda e: e.pos)
    return events


class ColorStack:
    """Active word colors ordered by rule priority.

    The bottom entry is the base color and is never removed; the top entry
    is the highest-priority rule currently covering the text.
    """

    def __init__(self, base_color: bytes) -> None:
        # Entries are (priority, color); the base sits below every rule.
        self._entries: list[tuple[int, bytes]] = [(-1, base_color)]

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def top(self) -> bytes:
        return self._entries[-1][1]

    def push(self, priority: int, color: bytes) -> None:
        """Insert above every entry of equal or lower priority."""
        pos = len(self._entries)
        while pos > 1 and self._entries[pos - 1][0] > priority:
            pos -= 1
        self._entries.insert(pos, (priority, color))

    def remove(self, priority: int) -> None:
        """Remove the topmost entry of a rule, leaving the base in place."""
        for pos in range(len(self._entries) - 1, 0, -1):
            if self._entries[pos][0] == priority:
                del self._entries[pos]
                return


def apply_word_rules(line: bytes, base_color: bytes, rules: Sequence[WordRule]) -> bytes:
    """Insert word rule colors into a line.

    Later rules take precedence where matches overlap. Text outside every
    match is shown in ``base_color``. All events at one position are
    applied together before a color change is emitted, so a span ending
    exactly where another begins produces a single change.

    Args:
        line: Line content without its trailing newline
        base_color: Color for text not covered by a match
        rules: Word rules in declaration order

    Returns:
        The colored line, or ``line`` itself when nothing matched
    """
    spans = find_spans(line, rules)
    if not spans:
        return line

    events = build_events(spans)
    stack = ColorStack(base_color)
    shown = base_color
    out = bytearray()
    cur = 0

    i = 0
    while i < len(events):
        pos = events[i].pos
        out += line[cur:pos]
        cur = pos

        while i < len(events) and events[i].pos == pos:
            event = events[i]
            if event.kind is EventKind.START:
                stack.push(event.priority, event.color)
            else:
                stack.remove(event.priority)
            i += 1

        if stack.top != shown:
            shown = stack.top
            out += shown

    out += line[cur:]
    return bytes(out)


def render_line(raw_line: bytes, rules: RuleSet) -> bytes:
    """Render one line, with or without its trailing newline.

    A line color is emitted before the text and reset after it. Lines
    without a line color use the reset sequence as their word base color.
    """
    has_newline = raw_line.endswith(NEWLINE)
    line = raw_line[:-1] if has_newline else raw_line

    line_color = pick_line_color(line, rules.line_rules, rules.default_color)
    colored = bool(line_color) and line_color != RESET
    base_color = line_color if line_color else RESET

    parts = []
    if line_color:
        parts.append(line_color)
    parts.append(apply_word_rules(line, base_color, rules.word_rules))
    if colored:
        parts.append(RESET)
    if has_newline:
        parts.append(NEWLINE)
    return b"".join(parts)
