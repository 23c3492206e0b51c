"""HTTP server for the HTML app generator relay.

Routes:
    GET  /                  static page with a streaming client
    GET  /health            liveness probe
    POST /generate          single non-streaming generation
    POST /generate/stream   SSE relay of a streaming generation

Usage:
    appgen-relay serve --port 8080
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from pydantic import BaseModel

from ..config import load_config, resolve_api_key
from ..types import ConfigurationError, RelayConfig, UpstreamError
from ..upstream import build_timeout, generate
from .driver import open_relay
from .page import get_index_html
from .sse import encode_events, with_keep_alive

logger = logging.getLogger(__name__)

_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


class GenerateRequest(BaseModel):
    prompt: str


def create_app(
    config: RelayConfig | None = None,
    config_path: str | Path | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create the FastAPI relay application.

    Args:
        config: Ready-made config; loaded from *config_path* (or discovered)
            when None.
        config_path: Path to an appgen-relay config file.
        client: Shared outbound client.  When None one is created here and
            closed on shutdown; an injected client is left to its owner.
    """
    if config is None:
        config = load_config(config_path)

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=build_timeout(config))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        yield
        if owns_client:
            await client.aclose()

    app = FastAPI(title="appgen-relay", lifespan=lifespan)
    app.state.config = config
    app.state.client = client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def index():
        return HTMLResponse(get_index_html())

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/generate")
    async def generate_code(payload: GenerateRequest):
        try:
            api_key = resolve_api_key(config)
        except ConfigurationError as e:
            logger.error("%s", e)
            return JSONResponse({"error": str(e)}, status_code=500)

        try:
            content = await generate(client, config, api_key, payload.prompt)
        except UpstreamError as e:
            return JSONResponse({"error": str(e)}, status_code=e.status_code or 502)
        return content

    @app.post("/generate/stream")
    async def generate_code_stream(payload: GenerateRequest):
        # Credential is checked before the stream opens so a missing key is
        # a plain 500, not a broken event stream.
        try:
            events = open_relay(payload.prompt, client, config)
        except ConfigurationError as e:
            logger.error("%s", e)
            return JSONResponse({"error": str(e)}, status_code=500)

        logger.info("Relay started (prompt=%d chars)", len(payload.prompt))
        frames = with_keep_alive(
            encode_events(events),
            interval=config.stream.keep_alive_interval,
            text=config.stream.keep_alive_text,
        )
        return StreamingResponse(
            frames,
            media_type="text/event-stream",
            headers=_SSE_HEADERS,
        )

    return app
