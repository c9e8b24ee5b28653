"""Byte stream writers: line buffering, colorizing and debug escaping."""

from __future__ import annotations

from collections.abc import Iterator
from io import BufferedIOBase
from typing import TYPE_CHECKING, BinaryIO, Protocol

from highlight_cli.core.colorizer import NEWLINE, render_line

if TYPE_CHECKING:
    from highlight_cli.core.rules import RuleSet

CHUNK_SIZE = 64 * 1024

# Escapes used for quoting, as in a double-quoted string literal
_SIMPLE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


class Writer(Protocol):
    """Anything bytes can be written to."""

    def write(self, data: bytes) -> int: ...


def split_lines(data: bytes) -> Iterator[bytes]:
    """Split data after each newline.

    Unlike ``bytes.splitlines`` only ``\\n`` ends a line, and no empty
    piece is produced after a trailing newline.
    """
    start = 0
    while start < len(data):
        end = data.find(NEWLINE, start)
        if end < 0:
            yield data[start:]
            return
        yield data[start : end + 1]
        start = end + 1


class LineBoundaryWriter:
    """Forwards only complete lines to its target.

    A trailing partial line is held back until a later write completes it
    or ``close()`` flushes it at end of stream.
    """

    def __init__(self, target: Writer) -> None:
        self.target = target
        self._pending = bytearray()

    @property
    def pending(self) -> bytes:
        return bytes(self._pending)

    def write(self, data: bytes) -> int:
        last_newline = data.rfind(NEWLINE)
        if last_newline < 0:
            self._pending += data
            return len(data)

        complete = bytes(self._pending) + data[: last_newline + 1]
        self._pending = bytearray(data[last_newline + 1 :])
        self.target.write(complete)
        return len(data)

    def close(self) -> None:
        """Flush the partial line, if any."""
        if self._pending:
            remainder = bytes(self._pending)
            self._pending.clear()
            self.target.write(remainder)


class ColorizerWriter:
    """Renders each line written to it and passes the result on.

    ``write`` reports the number of input bytes consumed, not the number
    of bytes emitted, which is larger whenever colors are inserted.
    """

    def __init__(self, rules: RuleSet, out: Writer) -> None:
        self.rules = rules
        self.out = out

    def write(self, data: bytes) -> int:
        for line in split_lines(data):
            self.out.write(render_line(line, self.rules))
        return len(data)


class EscapingWriter:
    """Writes lines escaped so color codes are visible instead of applied."""

    def __init__(self, out: Writer) -> None:
        self.out = out

    def write(self, data: bytes) -> int:
        for line in split_lines(data):
            has_newline = line.endswith(NEWLINE)
            if has_newline:
                line = line[:-1]
            self.out.write(escape_bytes(line).encode("utf-8"))
            if has_newline:
                self.out.write(NEWLINE)
        return len(data)


def escape_bytes(data: bytes) -> str:
    """Escape bytes like a double-quoted string literal, minus the quotes.

    Printable characters pass through, control characters and undecodable
    bytes become backslash escapes.
    """
    text = data.decode("utf-8", "surrogateescape")
    parts: list[str] = []
    for char in text:
        code = ord(char)
        if char in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[char])
        elif 0xDC80 <= code <= 0xDCFF:
            # Undecodable byte smuggled through by surrogateescape
            parts.append(f"\\x{code - 0xDC00:02x}")
        elif char.isprintable():
            parts.append(char)
        elif code < 0x80:
            parts.append(f"\\x{code:02x}")
        elif code <= 0xFFFF:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    return "".join(parts)


def copy_stream(source: BufferedIOBase, sink: LineBoundaryWriter, out: BinaryIO) -> int:
    """Copy ``source`` into ``sink`` until end of stream.

    ``out`` is flushed after every chunk so lines appear as soon as they
    are complete. Returns the number of bytes read.
    """
    total = 0
    while True:
        chunk = source.read1(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        sink.write(chunk)
        out.flush()
    sink.close()
    out.flush()
    return total
