"""Command-line interface for highlight."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from io import BufferedIOBase
from pathlib import Path
from typing import BinaryIO

import yaml
from pydantic import ValidationError

from highlight_cli import __version__
from highlight_cli.config.loader import load_config
from highlight_cli.config.schema import Config
from highlight_cli.core.color import ColorError, ColorParser
from highlight_cli.core.rules import PatternError, RuleBuilder, RuleSet
from highlight_cli.core.stream import (
    ColorizerWriter,
    EscapingWriter,
    LineBoundaryWriter,
    Writer,
    copy_stream,
)

USAGE = """\
Usage: highlight [options] [<mode> <color> <patterns...>]... [<patterns...>]

Highlight reads standard input and copies it to standard output, coloring
text that matches the given regex patterns. Mode flags change how the
patterns following them are applied.

Modes:
  -w <color>   Following patterns color the text they match.
  -l <color>   Following patterns color whole lines they match.
  -lx <color>  Following patterns color whole lines they do NOT match.

Patterns given before any mode flag color matching text in bright blue.

Line rules are tried in order and the first one that fires colors the
line. Word rules may overlap; where they do, the rule given last wins.

Options:
  -c <color>          Color for lines no line rule fires on. The last one
                      given wins.
  -p, --preset NAME   Apply the rules of a configured preset before the
                      rules on the command line. May be repeated.
  --list-presets      List the configured presets and exit.
  --config FILE       Configuration file
                      (default: ~/.config/highlight/config.yaml).
  --config-dir DIR    Drop-in configuration directory
                      (default: ~/.config/highlight/conf.d/).
  --no-color          Copy input unchanged.
  --debug             Show color codes escaped instead of applying them.
  -V, --version       Print the version and exit.
  -h, --help          Print this help and exit.
  --                  Treat every following argument as a pattern.

Colors:
  FG[+mods][:BG[+mods]]

  FG and BG are a color name or a 256-color palette number:
    black  red  green  yellow  blue  magenta  cyan  white  default
    0 1 2 ... 255
  A color alias from the configuration may be used instead.

  Foreground modifiers may be combined:
    d = dim    h = high-intensity    b = bold    u = underline
    i = inverse    s = strikethrough    B = blink
  Only h is allowed for the background.

  red+b          bold red
  red+u:blue+h   underlined red on bright blue
  black+hd       dark gray
  208            orange from the 256-color palette

Examples:
  tail -f app.log | highlight -c white+d -l red ERROR -w yellow+b 'user=\\w+'
    Lines containing ERROR are red, other lines dim white, and user names
    are bold yellow anywhere.

  make 2>&1 | highlight -lx white+d 'error|warning' -w red+b error
    Lines without errors or warnings are dimmed, 'error' is bold red.
"""

# Mode flags that take a color argument, without their leading dashes
RULE_MODES = ("w", "l", "lx", "c")

# Flags that take a value, without their leading dashes
VALUE_MODES = (*RULE_MODES, "p", "preset", "config", "config-dir")


class UsageError(ValueError):
    """Raised for malformed command-line arguments."""


@dataclass
class Arguments:
    """Parsed command-line arguments.

    Attributes:
        rule_args: Mode flags and patterns in command-line order, as
            (mode, value) pairs where mode is one of RULE_MODES or
            "pattern"
        presets: Preset names, in the order given
        config_path: Configuration file override
        config_dir: Drop-in directory override
        debug: Escape output instead of coloring it
        no_color: Copy input unchanged
        list_presets: List presets and exit
        show_help: Print usage and exit
        show_version: Print version and exit
    """

    rule_args: list[tuple[str, str]] = field(default_factory=list)
    presets: list[str] = field(default_factory=list)
    config_path: Path | None = None
    config_dir: Path | None = None
    debug: bool = False
    no_color: bool = False
    list_presets: bool = False
    show_help: bool = False
    show_version: bool = False


def parse_args(args: list[str] | None = None) -> Arguments:
    """Parse command-line arguments.

    Mode flags and patterns are kept in order since their order decides
    which rule each pattern belongs to and the rules' priority.

    Args:
        args: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments

    Raises:
        UsageError: For an unknown flag or a flag missing its value
    """
    if args is None:
        args = sys.argv[1:]

    # Hand-written rather than argparse: a pattern belongs to the mode flag
    # before it, so flags and patterns are read in one ordered pass
    parsed = Arguments()
    i = 0
    while i < len(args):
        arg = args[i]
        i += 1

        if arg == "--":
            parsed.rule_args.extend(("pattern", rest) for rest in args[i:])
            break

        if not arg.startswith("-") or arg == "-":
            parsed.rule_args.append(("pattern", arg))
            continue

        mode = arg.lstrip("-")
        if mode in ("h", "help"):
            parsed.show_help = True
            return parsed
        if mode in ("V", "version"):
            parsed.show_version = True
            return parsed
        if mode == "debug":
            parsed.debug = True
            continue
        if mode == "no-color":
            parsed.no_color = True
            continue
        if mode == "list-presets":
            parsed.list_presets = True
            continue

        if mode not in VALUE_MODES:
            raise UsageError(f"No such mode: {mode!r}")
        if i >= len(args):
            raise UsageError(f"Missing value for {arg}")
        value = args[i]
        i += 1

        if mode in RULE_MODES:
            parsed.rule_args.append((mode, value))
        elif mode in ("p", "preset"):
            parsed.presets.append(value)
        elif mode == "config":
            parsed.config_path = Path(value)
        elif mode == "config-dir":
            parsed.config_dir = Path(value)

    return parsed


def build_rules(parsed: Arguments, config: Config) -> RuleSet:
    """Build the rule set from presets and command-line rules.

    Raises:
        ColorError: For a color that does not resolve
        PatternError: For a pattern that does not compile
        UsageError: For an unknown preset
    """
    colors = ColorParser(config.colors)
    builder = RuleBuilder(implicit_color=colors.resolve(config.config.word_color))
    builder.set_default_color(colors.resolve(config.config.default_color))

    for name in parsed.presets:
        try:
            preset = config.get_preset(name)
        except KeyError as e:
            raise UsageError(e.args[0]) from None
        for rule in preset.rules:
            if rule.is_line_rule:
                builder.open_line_rule(colors.resolve(rule.line), inverse=rule.inverse)
            else:
                builder.open_word_rule(colors.resolve(rule.word))
            for pattern in rule.patterns:
                builder.add_pattern(pattern)

    # A preset's last rule must not receive command-line patterns
    if parsed.presets:
        builder.close_rule()

    for mode, value in parsed.rule_args:
        if mode == "pattern":
            builder.add_pattern(value)
        elif mode == "w":
            builder.open_word_rule(colors.resolve(value))
        elif mode == "l":
            builder.open_line_rule(colors.resolve(value))
        elif mode == "lx":
            builder.open_line_rule(colors.resolve(value), inverse=True)
        elif mode == "c":
            builder.set_default_color(colors.resolve(value))

    return builder.build()


def format_presets(config: Config) -> str:
    """Format the configured presets for --list-presets."""
    lines = []
    for preset in sorted(config.presets.values(), key=lambda p: p.name.lower()):
        if preset.description:
            lines.append(f"{preset.name:<16} {preset.description}")
        else:
            lines.append(preset.name)
    return "\n".join(lines)


def build_writer(rules: RuleSet, out: BinaryIO, debug: bool, color: bool) -> LineBoundaryWriter:
    """Chain the writers that turn input lines into output bytes."""
    sink: Writer = EscapingWriter(out) if debug else out
    if color:
        sink = ColorizerWriter(rules, sink)
    return LineBoundaryWriter(sink)


def main(
    args: list[str] | None = None,
    stdin: BufferedIOBase | None = None,
    stdout: BinaryIO | None = None,
) -> int:
    """Main entry point.

    Args:
        args: Command-line arguments
        stdin: Binary input stream (defaults to sys.stdin.buffer)
        stdout: Binary output stream (defaults to sys.stdout.buffer)

    Returns:
        Exit code
    """
    try:
        parsed = parse_args(args)
    except UsageError as e:
        print(f"{USAGE}\nERROR: {e}", file=sys.stderr)
        return 1

    if parsed.show_help:
        print(USAGE)
        return 0
    if parsed.show_version:
        print(f"highlight {__version__}")
        return 0

    # Load configuration
    try:
        config = load_config(
            config_path=parsed.config_path,
            dropin_dir=parsed.config_dir,
        )
    except (OSError, ValueError, yaml.YAMLError, ValidationError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    if parsed.list_presets:
        print(format_presets(config))
        return 0

    try:
        rules = build_rules(parsed, config)
    except (UsageError, PatternError, ColorError) as e:
        print(f"{USAGE}\nERROR: {e}", file=sys.stderr)
        return 1

    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout.buffer

    color = config.config.color and not parsed.no_color
    writer = build_writer(rules, stdout, debug=parsed.debug, color=color)

    try:
        copy_stream(stdin, writer, stdout)
    except KeyboardInterrupt:
        return 130
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
