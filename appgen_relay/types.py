"""Dataclasses, enums, and exceptions for appgen-relay."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Upstream stream frames
# ---------------------------------------------------------------------------

@dataclass
class StreamingContent:
    type: str
    text: str | None = None


@dataclass
class StreamingMessage:
    id: str | None = None
    type: str | None = None
    role: str | None = None
    content: list[StreamingContent] | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> StreamingMessage:
        content = raw.get("content")
        blocks: list[StreamingContent] | None = None
        if isinstance(content, list):
            blocks = [
                StreamingContent(type=b.get("type", ""), text=b.get("text"))
                for b in content
                if isinstance(b, dict)
            ]
        return cls(
            id=raw.get("id"),
            type=raw.get("type"),
            role=raw.get("role"),
            content=blocks,
        )


@dataclass
class StreamingDelta:
    type: str | None = None
    text: str | None = None


@dataclass
class StreamingEvent:
    """One decoded upstream ``data:`` payload.

    ``event_type`` is an open vocabulary: ``message_start``,
    ``content_block_delta`` and ``message_stop`` drive the relay, everything
    else (``ping``, ``content_block_start``, ``message_delta``...) passes
    through the dispatcher untouched.
    """
    event_type: str
    message: StreamingMessage | None = None
    delta: StreamingDelta | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> StreamingEvent:
        """Build from a decoded JSON object. Raises ``ValueError`` if the
        object has no string ``type``."""
        event_type = raw.get("type")
        if not isinstance(event_type, str):
            raise ValueError("streaming event has no 'type'")

        message = raw.get("message")
        delta = raw.get("delta")
        return cls(
            event_type=event_type,
            message=StreamingMessage.from_dict(message) if isinstance(message, dict) else None,
            delta=(
                StreamingDelta(type=delta.get("type"), text=delta.get("text"))
                if isinstance(delta, dict) else None
            ),
        )


# ---------------------------------------------------------------------------
# Outward events
# ---------------------------------------------------------------------------

class OutwardKind(Enum):
    STATUS = "status"      # progress text, unnamed SSE event
    TOKEN = "token"        # generated text, ``event: token``
    ERROR = "error"        # terminal, unnamed SSE event
    COMPLETE = "complete"  # terminal, unnamed SSE event


@dataclass
class OutwardEvent:
    kind: OutwardKind
    text: str
    seq: int = 0

    @property
    def terminal(self) -> bool:
        return self.kind in (OutwardKind.ERROR, OutwardKind.COMPLETE)


class RelayState(Enum):
    IDLE = "idle"
    STARTED = "started"
    STREAMING = "streaming"
    FINISHED = "finished"
    ABORTED = "aborted"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class RelayError(Exception):
    """Base class for appgen-relay errors."""


class ConfigurationError(RelayError):
    """Missing credential or invalid configuration."""


class UpstreamError(RelayError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class UpstreamConfig:
    url: str = "https://api.anthropic.com/v1/messages"
    api_version: str = "2023-06-01"
    api_key_env: str = "ANTHROPIC_API_KEY"
    connect_timeout: float = 10.0
    read_timeout: float = 120.0


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class StreamConfig:
    keep_alive_interval: float = 1.0
    keep_alive_text: str = "keep-alive-text"
    status_delay: float = 0.1  # pause after each opening status event


@dataclass
class RelayConfig:
    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
