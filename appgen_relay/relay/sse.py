"""Outward SSE encoding and the keep-alive heartbeat."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncGenerator, AsyncIterator

from ..types import OutwardEvent, OutwardKind


def encode_event(event: OutwardEvent) -> bytes:
    """Encode one outward event as an SSE frame.

    Tokens go out as ``event: token`` with a JSON body; every other kind is
    an unnamed event whose data is the plain status text.
    """
    if event.kind is OutwardKind.TOKEN:
        data = json.dumps(
            {"type": "token", "text": event.text},
            ensure_ascii=False,
            separators=(",", ":"),
        )
        return f"event: token\ndata: {data}\n\n".encode()
    lines = event.text.splitlines() or [""]
    return ("".join(f"data: {line}\n" for line in lines) + "\n").encode()


def keep_alive_frame(text: str) -> bytes:
    """SSE comment frame; ignored by EventSource parsers."""
    return f":{text}\n\n".encode()


async def encode_events(events: AsyncGenerator[OutwardEvent, None]) -> AsyncIterator[bytes]:
    try:
        async for event in events:
            yield encode_event(event)
    finally:
        await events.aclose()


async def with_keep_alive(
    frames: AsyncGenerator[bytes, None],
    interval: float,
    text: str = "keep-alive-text",
) -> AsyncIterator[bytes]:
    """Forward *frames*, inserting a keep-alive comment after every
    *interval* seconds without output.

    *frames* is pumped by a separate task through a one-slot queue, so the
    producer stays at most a frame ahead of a slow client.  When this
    generator is closed or cancelled (client went away) the task is
    cancelled, which unwinds *frames* and releases whatever it holds open
    upstream.
    """
    queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    async def pump() -> None:
        # Cancellation can land on put() with frames parked at a yield
        try:
            async for frame in frames:
                await queue.put(frame)
        finally:
            await frames.aclose()

    task = asyncio.create_task(pump())
    getter: asyncio.Future | None = None
    try:
        while True:
            # The getter survives a timeout so no frame is lost to it
            if getter is None:
                getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait(
                {getter, task},
                timeout=interval,
                return_when=asyncio.FIRST_COMPLETED,
            )
            if getter in done:
                item = getter.result()
                getter = None
                yield item
            elif task in done:
                if queue.empty():
                    break
                # Last frame still queued; the getter collects it next pass
            else:
                yield keep_alive_frame(text)
        # Re-raise anything the producer died with
        task.result()
    finally:
        if getter is not None:
            getter.cancel()
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
