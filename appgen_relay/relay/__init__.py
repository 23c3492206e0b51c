from .buffer import LineBuffer
from .dispatcher import EventDispatcher
from .driver import RelaySession, open_relay
from .server import create_app
from .sse import encode_event, with_keep_alive

__all__ = [
    "create_app",
    "open_relay",
    "RelaySession",
    "LineBuffer",
    "EventDispatcher",
    "encode_event",
    "with_keep_alive",
]
