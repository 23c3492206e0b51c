"""Tests for appgen_relay.relay.frames."""

from __future__ import annotations

import json

import pytest

from appgen_relay.relay.frames import decode_event, extract_payload, is_done
from appgen_relay.types import StreamingEvent


class TestExtractPayload:
    def test_data_line(self):
        assert extract_payload('data: {"type":"ping"}') == '{"type":"ping"}'

    def test_blank_line(self):
        assert extract_payload("") is None

    @pytest.mark.parametrize("line", [
        "event: content_block_delta",
        ": comment",
        "id: 7",
        "retry: 1000",
        "data:{\"type\":\"ping\"}",  # no space after the colon
    ])
    def test_other_lines_ignored(self, line):
        assert extract_payload(line) is None

    def test_done_sentinel(self):
        payload = extract_payload("data: [DONE]")
        assert payload == "[DONE]"
        assert is_done(payload)

    def test_done_must_be_exact(self):
        assert not is_done("[DONE] ")
        assert not is_done('"[DONE]"')


class TestDecodeEvent:
    def test_message_start(self):
        payload = json.dumps({
            "type": "message_start",
            "message": {
                "id": "msg_01",
                "type": "message",
                "role": "assistant",
                "content": [{"type": "text", "text": ""}],
            },
        })
        event = decode_event(payload)
        assert isinstance(event, StreamingEvent)
        assert event.event_type == "message_start"
        assert event.message.id == "msg_01"
        assert event.message.role == "assistant"
        assert event.message.content[0].type == "text"
        assert event.delta is None

    def test_content_block_delta(self):
        payload = '{"type":"content_block_delta","index":0,"delta":{"type":"text_delta","text":"div>"}}'
        event = decode_event(payload)
        assert event.event_type == "content_block_delta"
        assert event.delta.type == "text_delta"
        assert event.delta.text == "div>"

    def test_unknown_type_decodes(self):
        event = decode_event('{"type":"ping"}')
        assert event.event_type == "ping"
        assert event.message is None
        assert event.delta is None

    @pytest.mark.parametrize("payload", [
        "{not valid}",
        "",
        "[1, 2, 3]",
        '"just a string"',
        "{}",
        '{"type": 5}',
    ])
    def test_malformed_returns_none(self, payload):
        assert decode_event(payload) is None

    @pytest.mark.regression("RELAY-001")
    def test_oversized_integer_returns_none(self):
        assert decode_event('{"type":"ping","n":' + "9" * 5000 + "}") is None

    @pytest.mark.regression("RELAY-001")
    def test_deep_nesting_returns_none(self):
        assert decode_event("[" * 100000) is None

    def test_malformed_logged_at_debug(self, caplog):
        with caplog.at_level("DEBUG", logger="appgen_relay.relay.frames"):
            decode_event("{not valid}")
        assert "Could not parse streaming event" in caplog.text
        assert all(r.levelname == "DEBUG" for r in caplog.records)
