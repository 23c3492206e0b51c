"""appgen-relay: SSE relay for streaming HTML app generation."""

from .config import load_config
from .types import (
    ConfigurationError,
    OutwardEvent,
    OutwardKind,
    RelayConfig,
    RelayError,
    RelayState,
    StreamingEvent,
    UpstreamError,
)

__version__ = "0.1.0"

__all__ = [
    "load_config",
    "ConfigurationError",
    "OutwardEvent",
    "OutwardKind",
    "RelayConfig",
    "RelayError",
    "RelayState",
    "StreamingEvent",
    "UpstreamError",
]
