"""Tests for the stream module."""

from io import BytesIO

import pytest

from highlight_cli.core.color import RESET
from highlight_cli.core.rules import RuleSet
from highlight_cli.core.stream import (
    ColorizerWriter,
    EscapingWriter,
    LineBoundaryWriter,
    copy_stream,
    escape_bytes,
    split_lines,
)


class RecordingWriter:
    """Records every write call."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data)

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)


class TestSplitLines:
    """Tests for split_lines function."""

    @pytest.mark.parametrize(
        "data, expected",
        [
            (b"", []),
            (b"a", [b"a"]),
            (b"a\n", [b"a\n"]),
            (b"a\nb", [b"a\n", b"b"]),
            (b"\n\n", [b"\n", b"\n"]),
            (b"a\r\nb\x0bc\n", [b"a\r\n", b"b\x0bc\n"]),
        ],
    )
    def test_split(self, data, expected):
        """Test that only newlines end lines."""
        assert list(split_lines(data)) == expected


class TestLineBoundaryWriter:
    """Tests for LineBoundaryWriter class."""

    def test_complete_lines_forwarded(self):
        """Test that complete lines go straight through."""
        target = RecordingWriter()
        writer = LineBoundaryWriter(target)

        assert writer.write(b"one\ntwo\n") == 8
        assert target.writes == [b"one\ntwo\n"]
        assert writer.pending == b""

    def test_partial_line_held_back(self):
        """Test that a partial line is not forwarded."""
        target = RecordingWriter()
        writer = LineBoundaryWriter(target)

        assert writer.write(b"one\ntw") == 6
        assert target.writes == [b"one\n"]
        assert writer.pending == b"tw"

        writer.write(b"o")
        assert target.writes == [b"one\n"]

        writer.write(b"\nthree")
        assert target.writes == [b"one\n", b"two\n"]
        assert writer.pending == b"three"

    def test_close_flushes_partial_line(self):
        """Test that close forwards the final partial line."""
        target = RecordingWriter()
        writer = LineBoundaryWriter(target)

        writer.write(b"last")
        writer.close()

        assert target.writes == [b"last"]
        assert writer.pending == b""

    def test_close_without_pending(self):
        """Test that close writes nothing when no partial line remains."""
        target = RecordingWriter()
        writer = LineBoundaryWriter(target)

        writer.write(b"done\n")
        writer.close()

        assert target.writes == [b"done\n"]

    def test_byte_by_byte_never_splits_lines(self):
        """Test arbitrary write boundaries."""
        target = RecordingWriter()
        writer = LineBoundaryWriter(target)
        data = b"alpha\nbeta\n\ngamma"

        for i in range(len(data)):
            writer.write(data[i : i + 1])
        writer.close()

        assert target.writes == [b"alpha\n", b"beta\n", b"\n", b"gamma"]


class TestColorizerWriter:
    """Tests for ColorizerWriter class."""

    def test_returns_input_length(self, word_rule):
        """Test that the consumed count is the input length."""
        out = RecordingWriter()
        rules = RuleSet(word_rules=(word_rule(b"<W>", "fox"),))
        writer = ColorizerWriter(rules, out)

        data = b"a fox\nno match\n"
        assert writer.write(data) == len(data)
        assert out.data == b"a <W>fox" + RESET + b"\nno match\n"

    def test_lines_rendered_independently(self, line_rule):
        """Test that a line color does not bleed into the next line."""
        out = RecordingWriter()
        rules = RuleSet(line_rules=(line_rule(b"<L>", "x"),))

        ColorizerWriter(rules, out).write(b"x\ny\nx")

        assert out.data == b"<L>x" + RESET + b"\ny\n<L>x" + RESET

    def test_chunking_does_not_change_output(self, line_rule, word_rule):
        """Test that output is the same for any write boundaries."""
        rules = RuleSet(
            line_rules=(line_rule(b"<L>", "lazy"),),
            word_rules=(word_rule(b"<W>", "o\\w"),),
        )
        data = b"The quick brown fox\nover the lazy dog\nend"

        whole = RecordingWriter()
        writer = LineBoundaryWriter(ColorizerWriter(rules, whole))
        writer.write(data)
        writer.close()

        pieces = RecordingWriter()
        writer = LineBoundaryWriter(ColorizerWriter(rules, pieces))
        for i in range(0, len(data), 3):
            writer.write(data[i : i + 3])
        writer.close()

        assert pieces.data == whole.data


class TestEscapingWriter:
    """Tests for EscapingWriter and escape_bytes."""

    def test_escape_color_codes(self):
        """Test that escape sequences become visible."""
        out = RecordingWriter()

        count = EscapingWriter(out).write(b"\x1b[0;31mred\x1b[0m\n")

        assert count == 15
        assert out.data == b"\\x1b[0;31mred\\x1b[0m\n"

    def test_last_line_without_newline(self):
        """Test that no newline is added to an unterminated line."""
        out = RecordingWriter()

        EscapingWriter(out).write(b"a\nb")

        assert out.data == b"a\nb"

    @pytest.mark.parametrize(
        "data, expected",
        [
            (b"plain", "plain"),
            (b'say "hi"', 'say \\"hi\\"'),
            (b"back\\slash", "back\\\\slash"),
            (b"tab\there", "tab\\there"),
            (b"cr\r", "cr\\r"),
            (b"\x00\x7f", "\\x00\\x7f"),
            (b"\xff\xfe", "\\xff\\xfe"),
            ("café".encode(), "café"),
            ("\u200b".encode(), "\\u200b"),
        ],
    )
    def test_escape_bytes(self, data, expected):
        """Test the escaping rules."""
        assert escape_bytes(data) == expected


class TestCopyStream:
    """Tests for copy_stream function."""

    def test_copy_until_end_of_stream(self, word_rule):
        """Test copying a whole stream through the writer chain."""
        source = BytesIO(b"the lazy dog\nthe end")
        out = BytesIO()
        rules = RuleSet(word_rules=(word_rule(b"<W>", "the"),))

        total = copy_stream(source, LineBoundaryWriter(ColorizerWriter(rules, out)), out)

        assert total == 20
        assert out.getvalue() == (
            b"<W>the" + RESET + b" lazy dog\n<W>the" + RESET + b" end"
        )

    def test_empty_input(self):
        """Test that empty input produces no output."""
        out = BytesIO()

        assert copy_stream(BytesIO(b""), LineBoundaryWriter(out), out) == 0
        assert out.getvalue() == b""

    def test_buffered_reader_source(self, tmp_path):
        """Test copying from a buffered file object."""
        path = tmp_path / "input.txt"
        path.write_bytes(b"one\ntwo")
        out = BytesIO()

        with open(path, "rb") as source:
            total = copy_stream(source, LineBoundaryWriter(out), out)

        assert total == 7
        assert out.getvalue() == b"one\ntwo"
