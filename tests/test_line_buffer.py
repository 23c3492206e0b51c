"""Tests for appgen_relay.relay.buffer."""

from __future__ import annotations

import pytest

from appgen_relay.relay.buffer import LineBuffer

STREAM = (
    b"event: message_start\r\n"
    b'data: {"type":"message_start"}\r\n'
    b"\r\n"
    b"event: content_block_delta\n"
    b'data: {"type":"content_block_delta","delta":{"type":"text_delta","text":"caf\xc3\xa9 \xe2\x9c\x93"}}\n'
    b"\n"
    b"data: [DONE]\n"
)


def _feed_all(chunks: list[bytes]) -> list[str]:
    buf = LineBuffer()
    lines: list[str] = []
    for chunk in chunks:
        lines.extend(buf.feed(chunk))
    return lines


def _split(data: bytes, cuts: list[int]) -> list[bytes]:
    points = [0, *sorted(cuts), len(data)]
    return [data[a:b] for a, b in zip(points, points[1:])]


class TestFeed:
    def test_complete_lines(self):
        buf = LineBuffer()
        assert list(buf.feed(b"one\ntwo\n")) == ["one", "two"]
        assert buf.pending == ""

    def test_partial_line_retained(self):
        buf = LineBuffer()
        assert list(buf.feed(b"data: hel")) == []
        assert buf.pending == "data: hel"
        assert list(buf.feed(b"lo\nda")) == ["data: hello"]
        assert buf.pending == "da"

    def test_lines_are_trimmed(self):
        buf = LineBuffer()
        assert list(buf.feed(b"  data: x \r\n")) == ["data: x"]

    def test_blank_lines_yielded_empty(self):
        buf = LineBuffer()
        assert list(buf.feed(b"a\n\nb\n")) == ["a", "", "b"]

    def test_crlf_split_across_chunks(self):
        buf = LineBuffer()
        assert list(buf.feed(b"data: x\r")) == []
        assert list(buf.feed(b"\ndata: y\r\n")) == ["data: x", "data: y"]

    def test_newline_alone_in_chunk(self):
        buf = LineBuffer()
        assert list(buf.feed(b"abc")) == []
        assert list(buf.feed(b"\n")) == ["abc"]

    def test_iteration_is_lazy(self):
        buf = LineBuffer()
        lines = buf.feed(b"a\nb\nc\n")
        assert next(lines) == "a"
        # Unread lines are still in the buffer for a later iterator
        assert list(buf.feed(b"")) == ["b", "c"]

    def test_multibyte_character_split(self):
        buf = LineBuffer()
        assert list(buf.feed(b"caf\xc3")) == []
        assert list(buf.feed(b"\xa9\n")) == ["café"]


class TestInvalidUtf8:
    def test_bad_chunk_skipped(self):
        buf = LineBuffer()
        assert list(buf.feed(b"data: a\n")) == ["data: a"]
        assert list(buf.feed(b"\xff\xfe garbage\n")) == []
        assert list(buf.feed(b"data: b\n")) == ["data: b"]

    def test_bad_chunk_keeps_earlier_partial(self):
        buf = LineBuffer()
        list(buf.feed(b"data: he"))
        list(buf.feed(b"\xff\n"))
        assert list(buf.feed(b"llo\n")) == ["data: hello"]

    @pytest.mark.regression("RELAY-002")
    def test_dangling_lead_byte_does_not_cost_next_chunk(self):
        buf = LineBuffer()
        assert list(buf.feed(b"data: a\xc3")) == []
        assert list(buf.feed(b"(b\ndata: c\n")) == ["data: a(b", "data: c"]

    def test_bad_chunk_logged(self, caplog):
        buf = LineBuffer()
        with caplog.at_level("ERROR", logger="appgen_relay.relay.buffer"):
            list(buf.feed(b"\xc3\x28"))
        assert "Invalid UTF-8" in caplog.text


class TestReassembly:
    @pytest.mark.parametrize("cuts", [
        [],
        [1],
        [5, 6, 7],
        [21, 22],
        [len(STREAM) - 1],
        list(range(1, 40, 3)),
    ])
    def test_chunking_does_not_change_lines(self, cuts):
        expected = _feed_all([STREAM])
        assert _feed_all(_split(STREAM, cuts)) == expected

    def test_byte_at_a_time(self):
        expected = _feed_all([STREAM])
        one_by_one = [STREAM[i:i + 1] for i in range(len(STREAM))]
        assert _feed_all(one_by_one) == expected
        assert "café ✓" in expected[4]
