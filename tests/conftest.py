"""Shared fixtures for appgen-relay tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from appgen_relay.config import load_config
from appgen_relay.types import RelayConfig

API_KEY_ENV = "ANTHROPIC_API_KEY"


def sse_data(payload: dict | str) -> bytes:
    """One upstream ``data:`` frame, as the Messages API sends it."""
    if isinstance(payload, dict):
        event_type = payload.get("type", "")
        body = json.dumps(payload)
        return f"event: {event_type}\ndata: {body}\n\n".encode()
    return f"data: {payload}\n\n".encode()


def delta(text: str) -> dict:
    return {
        "type": "content_block_delta",
        "index": 0,
        "delta": {"type": "text_delta", "text": text},
    }


MESSAGE_START = {
    "type": "message_start",
    "message": {
        "id": "msg_01",
        "type": "message",
        "role": "assistant",
        "content": [],
        "model": "claude-3-haiku-20240307",
    },
}
MESSAGE_STOP = {"type": "message_stop"}


class ChunkStream(httpx.AsyncByteStream):
    """Upstream body that yields fixed chunks and records ``aclose()``.

    An ``Exception`` in *chunks* is raised instead of yielded.
    """

    def __init__(self, chunks: list, *, delay: float = 0.0) -> None:
        self.chunks = chunks
        self.delay = delay
        self.closed = False
        self.yielded = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            if self.delay:
                await asyncio.sleep(self.delay)
            if isinstance(chunk, Exception):
                raise chunk
            self.yielded += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


class FakeUpstream:
    """``httpx.MockTransport`` handler that records every request."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    @property
    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


def streaming_upstream(chunks: list, *, status: int = 200, delay: float = 0.0) -> tuple[FakeUpstream, ChunkStream]:
    stream = ChunkStream(chunks, delay=delay)
    upstream = FakeUpstream(
        lambda request: httpx.Response(
            status,
            headers={"content-type": "text/event-stream"},
            stream=stream,
        )
    )
    return upstream, stream


@pytest.fixture
def relay_config() -> RelayConfig:
    return load_config(config_dict={
        "stream": {
            "status_delay": 0,
            "keep_alive_interval": 5.0,
        },
    })


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.setenv(API_KEY_ENV, "sk-test-key")
    return "sk-test-key"


@pytest.fixture
def no_api_key(monkeypatch) -> None:
    monkeypatch.delenv(API_KEY_ENV, raising=False)
