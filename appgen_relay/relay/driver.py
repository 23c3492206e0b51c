"""Relay driver: one upstream streaming request in, outward events out.

Pipeline per session::

    httpx aiter_bytes() -> LineBuffer -> frames -> EventDispatcher -> OutwardEvent

Every session owns its own buffer, dispatcher and sequence counter; the
``httpx.AsyncClient`` is the only shared object and is passed in.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator, Mapping
from dataclasses import dataclass, field

import httpx

from ..config import resolve_api_key
from ..types import OutwardEvent, OutwardKind, RelayConfig
from ..upstream import build_headers, build_payload, build_timeout, status_label
from .buffer import LineBuffer
from .dispatcher import EventDispatcher

logger = logging.getLogger(__name__)

STARTING = "Starting generation..."
PREPARING = "Preparing request to Anthropic API..."
SENDING = "Sending request to Anthropic API..."
STREAMING = "Streaming response from Anthropic API..."
STREAM_ENDED = "Stream ended"


@dataclass
class RelaySession:
    """State for one inbound request."""
    prompt: str
    buffer: LineBuffer = field(default_factory=LineBuffer)
    dispatcher: EventDispatcher = field(default_factory=EventDispatcher)
    seq: int = 0

    @property
    def finished(self) -> bool:
        return self.dispatcher.finished

    def stamp(self, event: OutwardEvent) -> OutwardEvent:
        event.seq = self.seq
        self.seq += 1
        return event

    def emit(self, kind: OutwardKind, text: str) -> OutwardEvent:
        return self.stamp(OutwardEvent(kind, text))

    def fail(self, text: str) -> OutwardEvent:
        self.dispatcher.abort()
        return self.emit(OutwardKind.ERROR, text)

    def feed(self, chunk: bytes) -> Iterator[OutwardEvent]:
        """Push one raw chunk through buffer and dispatcher.

        Stops at the first terminal event; lines buffered after it are
        never dispatched.
        """
        for line in self.buffer.feed(chunk):
            for event in self.dispatcher.feed_line(line):
                yield self.stamp(event)
            if self.finished:
                return


def open_relay(
    prompt: str,
    client: httpx.AsyncClient,
    config: RelayConfig,
    environ: Mapping[str, str] | None = None,
) -> AsyncIterator[OutwardEvent]:
    """Start a relay session for *prompt*.

    The credential check runs here, before any stream exists, and raises
    ``ConfigurationError``.  Everything after that is reported in-band by
    the returned async iterator, which always ends with a complete, error,
    or "Stream ended" event.
    """
    api_key = resolve_api_key(config, environ)
    return _relay(RelaySession(prompt), client, config, api_key)


async def _relay(
    session: RelaySession,
    client: httpx.AsyncClient,
    config: RelayConfig,
    api_key: str,
) -> AsyncIterator[OutwardEvent]:
    delay = config.stream.status_delay

    yield session.emit(OutwardKind.STATUS, STARTING)
    await asyncio.sleep(delay)

    yield session.emit(OutwardKind.STATUS, PREPARING)
    await asyncio.sleep(delay)

    request = client.build_request(
        "POST",
        config.upstream.url,
        headers=build_headers(config, api_key),
        json=build_payload(session.prompt, stream=True),
        timeout=build_timeout(config),
    )

    yield session.emit(OutwardKind.STATUS, SENDING)

    try:
        upstream = await client.send(request, stream=True)
    except httpx.HTTPError as e:
        logger.error("Request to Anthropic API failed: %s", e)
        yield session.fail(f"Error: Request failed - {e}")
        return

    try:
        if upstream.status_code >= 300:
            try:
                error_text = (await upstream.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError:
                error_text = "Unknown error"
            logger.error("Anthropic API error: %s - %s", status_label(upstream), error_text)
            yield session.fail(f"Error: API error - {status_label(upstream)}")
            return

        yield session.emit(OutwardKind.STATUS, STREAMING)

        try:
            async for chunk in upstream.aiter_bytes():
                for event in session.feed(chunk):
                    yield event
                if session.finished:
                    return
        except httpx.HTTPError as e:
            logger.error("Error reading stream chunk: %s", e)
            yield session.fail(f"Error: Stream error - {e}")
            return

        yield session.emit(OutwardKind.STATUS, STREAM_ENDED)
    finally:
        await upstream.aclose()
