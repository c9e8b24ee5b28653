"""ANSI color spec parsing.

Color specs have the form ``FG[+mods][:BG[+mods]]``, for example
``red+b:white+h``. The resolved escape sequence is treated as an opaque
token by the rest of the program.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

RESET = b"\033[0m"
NO_COLOR = b""

# Standard ANSI color names
COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
    "default": 9,
}

# Foreground modifier letters
ATTRIBUTES = {
    "b": "bold",
    "d": "dim",
    "u": "underline",
    "B": "blink",
    "i": "inverse",
    "s": "strikethrough",
}

# Modifier that selects the high-intensity palette
HIGH_INTENSITY = "h"

DEFAULT_WORD_COLOR = "blue+h"


class ColorError(ValueError):
    """Raised for a color spec that cannot be resolved."""


@dataclass
class ParsedColor:
    """Parsed color specification.

    Attributes:
        fg: Foreground color (palette name, 256-color index, or None)
        bg: Background color (palette name, 256-color index, or None)
        fg_bright: High-intensity foreground
        bg_bright: High-intensity background
        bold: Bold attribute
        dim: Dim attribute
        underline: Underline attribute
        blink: Blink attribute
        inverse: Inverse attribute
        strikethrough: Strikethrough attribute
    """

    fg: str | int | None = None
    bg: str | int | None = None
    fg_bright: bool = False
    bg_bright: bool = False
    bold: bool = False
    dim: bool = False
    underline: bool = False
    blink: bool = False
    inverse: bool = False
    strikethrough: bool = False

    def to_ansi(self) -> str:
        """Convert to ANSI escape sequence.

        The sequence always resets first so attributes of an enclosing
        color do not carry over.
        """
        codes: list[str] = ["0"]

        if self.bold:
            codes.append("1")
        if self.dim:
            codes.append("2")
        if self.underline:
            codes.append("4")
        if self.blink:
            codes.append("5")
        if self.inverse:
            codes.append("7")
        if self.strikethrough:
            codes.append("9")

        if self.fg is not None:
            codes.append(self._color_to_code(self.fg, foreground=True, bright=self.fg_bright))
        if self.bg is not None:
            codes.append(self._color_to_code(self.bg, foreground=False, bright=self.bg_bright))

        return f"\033[{';'.join(codes)}m"

    def to_bytes(self) -> bytes:
        return self.to_ansi().encode("ascii")

    @staticmethod
    def _color_to_code(color: str | int, foreground: bool, bright: bool) -> str:
        """Convert a palette name or index to its SGR parameter."""
        if isinstance(color, int):
            return f"{38 if foreground else 48};5;{color}"

        if foreground:
            base = 90 if bright else 30
        else:
            base = 100 if bright else 40
        return str(base + COLORS[color])


class ColorParser:
    """Parser for ``FG[+mods][:BG[+mods]]`` color specs."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        """Initialize the parser.

        Args:
            aliases: Named color specs that may be used in place of a spec
        """
        self.aliases = {name.lower(): spec for name, spec in (aliases or {}).items()}

    def parse(self, color_spec: str) -> ParsedColor:
        """Parse a color specification string.

        Args:
            color_spec: Color string like "red+b:white+h"

        Returns:
            ParsedColor object

        Raises:
            ColorError: If the spec is malformed

        Examples:
            >>> color = ColorParser().parse("red+b:white+h")
            >>> color.fg, color.bold, color.bg, color.bg_bright
            ('red', True, 'white', True)
        """
        color_spec = self.aliases.get(color_spec.lower(), color_spec)

        fg_part, sep, bg_part = color_spec.partition(":")
        if ":" in bg_part:
            raise ColorError(f"Too many ':' in color {color_spec!r}")

        result = ParsedColor()

        fg_name, _, fg_mods = fg_part.partition("+")
        if fg_name:
            result.fg = self._parse_color_name(fg_name, color_spec)
        for mod in fg_mods:
            if mod == HIGH_INTENSITY:
                result.fg_bright = True
            elif mod in ATTRIBUTES:
                setattr(result, ATTRIBUTES[mod], True)
            else:
                raise ColorError(f"Unknown modifier {mod!r} in color {color_spec!r}")

        if sep:
            bg_name, _, bg_mods = bg_part.partition("+")
            if not bg_name:
                raise ColorError(f"Missing background color in {color_spec!r}")
            result.bg = self._parse_color_name(bg_name, color_spec)
            for mod in bg_mods:
                if mod != HIGH_INTENSITY:
                    raise ColorError(
                        f"Only the '{HIGH_INTENSITY}' modifier is allowed for backgrounds: {color_spec!r}"
                    )
                result.bg_bright = True

        return result

    def resolve(self, color_spec: str) -> bytes:
        """Resolve a color spec to its escape sequence.

        ``""`` and ``"off"`` resolve to no color, ``"reset"`` to the reset
        sequence.
        """
        spec = self.aliases.get(color_spec.lower(), color_spec)
        if spec.lower() in ("", "off"):
            return NO_COLOR
        if spec.lower() == "reset":
            return RESET
        return self.parse(spec).to_bytes()

    @staticmethod
    def _parse_color_name(name: str, color_spec: str) -> str | int:
        if name.isdigit():
            index = int(name)
            if index > 255:
                raise ColorError(f"Color index {index} out of range 0-255 in {color_spec!r}")
            return index
        if name not in COLORS:
            raise ColorError(f"Unknown color {name!r} in {color_spec!r}")
        return name


def parse_color(color_spec: str) -> ParsedColor:
    """Parse a color specification string.

    Args:
        color_spec: Color string like "red+b:white+h"

    Returns:
        ParsedColor object
    """
    return ColorParser().parse(color_spec)


def resolve_color(color_spec: str, aliases: Mapping[str, str] | None = None) -> bytes:
    """Resolve a color spec (or alias) to its escape sequence."""
    return ColorParser(aliases).resolve(color_spec)
