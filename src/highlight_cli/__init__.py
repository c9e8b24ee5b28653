"""Colorize lines and words of a text stream by regex rules."""

__version__ = "0.1.0"
