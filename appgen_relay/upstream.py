"""Anthropic Messages API request shape, plus the non-streaming call.

Called via httpx directly (no SDK dependency).  Model, token budget and
temperature are fixed; only the endpoint and API version come from config.
"""

from __future__ import annotations

import logging

import httpx

from .prompts import ASSISTANT_PREFIX, SYSTEM_PROMPT
from .types import RelayConfig, UpstreamError

logger = logging.getLogger(__name__)

MODEL = "claude-3-haiku-20240307"
MAX_TOKENS = 4096
TEMPERATURE = 1.0


def build_messages(prompt: str) -> list[dict]:
    """User prompt plus an assistant turn pre-seeded with ``ASSISTANT_PREFIX``."""
    return [
        {"role": "user", "content": [{"type": "text", "text": prompt}]},
        {"role": "assistant", "content": [{"type": "text", "text": ASSISTANT_PREFIX}]},
    ]


def build_payload(prompt: str, stream: bool = False) -> dict:
    payload = {
        "model": MODEL,
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
        "system": SYSTEM_PROMPT,
        "messages": build_messages(prompt),
    }
    if stream:
        payload["stream"] = True
    return payload


def build_headers(config: RelayConfig, api_key: str) -> dict[str, str]:
    return {
        "content-type": "application/json",
        "x-api-key": api_key,
        "anthropic-version": config.upstream.api_version,
    }


def build_timeout(config: RelayConfig) -> httpx.Timeout:
    return httpx.Timeout(config.upstream.read_timeout, connect=config.upstream.connect_timeout)


def status_label(response: httpx.Response) -> str:
    """``"429 Too Many Requests"`` style label for a response."""
    reason = response.reason_phrase
    return f"{response.status_code} {reason}" if reason else str(response.status_code)


async def generate(
    client: httpx.AsyncClient,
    config: RelayConfig,
    api_key: str,
    prompt: str,
) -> dict:
    """Send a single non-streaming request and return the last content block.

    Raises ``UpstreamError``; ``status_code`` is set for non-success upstream
    responses and left as None for transport or parse failures.
    """
    try:
        response = await client.post(
            config.upstream.url,
            headers=build_headers(config, api_key),
            json=build_payload(prompt),
        )
    except httpx.HTTPError as e:
        logger.error("Request to Anthropic API failed: %s", e)
        raise UpstreamError(f"Request failed: {e}") from e

    if response.status_code >= 300:
        logger.error("Anthropic API error: %s - %s", status_label(response), response.text)
        raise UpstreamError(
            f"API error: {status_label(response)}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as e:
        logger.error("Failed to parse response: %s", e)
        raise UpstreamError(f"Failed to parse response: {e}") from e

    content = data.get("content") if isinstance(data, dict) else None
    blocks = [
        b for b in (content if isinstance(content, list) else [])
        if isinstance(b, dict) and isinstance(b.get("text"), str)
    ]
    if not blocks:
        logger.error("No content returned from API")
        raise UpstreamError("No content returned from API", status_code=500)

    block = blocks[-1]
    return {"text": block["text"], "type": block.get("type", "text")}
