"""Tests for the buffered line reader."""

from kmp_install.parsers.lines import LineBuffer


class TestLineBuffer:
    def test_complete_lines(self):
        buffer = LineBuffer()
        assert buffer.feed(b"one\ntwo\n") == ["one", "two"]
        assert buffer.flush() == []

    def test_line_split_across_reads(self):
        buffer = LineBuffer()
        assert buffer.feed(b"The following NEW pack") == []
        assert buffer.feed(b"age is going to be installed:\n  foo") == [
            "The following NEW package is going to be installed:"
        ]
        assert buffer.flush() == ["  foo"]

    def test_blank_lines_kept(self):
        buffer = LineBuffer()
        assert buffer.feed(b"a\n\nb\n") == ["a", "", "b"]

    def test_multibyte_split(self):
        buffer = LineBuffer()
        data = "Paket übersprungen\n".encode()
        cut = data.index(b"\xc3") + 1
        assert buffer.feed(data[:cut]) == []
        assert buffer.feed(data[cut:]) == ["Paket übersprungen"]

    def test_carriage_return_stripped(self):
        buffer = LineBuffer()
        assert buffer.feed(b"done\r\n") == ["done"]

    def test_flush_empties_buffer(self):
        buffer = LineBuffer()
        buffer.feed(b"tail")
        assert buffer.flush() == ["tail"]
        assert buffer.flush() == []
