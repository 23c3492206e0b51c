"""Event dispatcher: upstream frames in, outward relay events out."""

from __future__ import annotations

import logging

from ..prompts import ASSISTANT_PREFIX
from ..types import OutwardEvent, OutwardKind, RelayState, StreamingEvent
from .frames import decode_event, extract_payload, is_done

logger = logging.getLogger(__name__)

MESSAGE_STARTED = "Starting message generation..."
GENERATION_COMPLETE = "Generation complete!"

_TERMINAL_STATES = frozenset({RelayState.FINISHED, RelayState.ABORTED})


class EventDispatcher:
    """Per-session state machine over decoded upstream events.

    IDLE -> STARTED -> STREAMING -> FINISHED, with ABORTED reachable from
    any non-terminal state.  Once terminal, nothing more is emitted.
    """

    def __init__(self) -> None:
        self.state = RelayState.IDLE
        # True until the first token has gone out
        self.first_token = True

    @property
    def finished(self) -> bool:
        return self.state in _TERMINAL_STATES

    def _transition_to(self, new_state: RelayState) -> None:
        old = self.state
        self.state = new_state
        if old != new_state:
            logger.debug("Relay state: %s -> %s", old.value, new_state.value)

    def feed_line(self, line: str) -> list[OutwardEvent]:
        """Parse one buffered line and dispatch it."""
        if self.finished:
            return []
        payload = extract_payload(line)
        if payload is None:
            return []
        if is_done(payload):
            return self.finish()
        event = decode_event(payload)
        if event is None:
            return []
        return self.dispatch(event)

    def dispatch(self, event: StreamingEvent) -> list[OutwardEvent]:
        if self.finished:
            return []

        if event.event_type == "message_start":
            self._transition_to(RelayState.STARTED)
            return [OutwardEvent(OutwardKind.STATUS, MESSAGE_STARTED)]

        if event.event_type == "content_block_delta":
            text = event.delta.text if event.delta else None
            if not isinstance(text, str):
                return []
            if self.first_token:
                text = ASSISTANT_PREFIX + text
                self.first_token = False
            self._transition_to(RelayState.STREAMING)
            return [OutwardEvent(OutwardKind.TOKEN, text)]

        if event.event_type == "message_stop":
            return self.finish()

        # ping, content_block_start/stop, message_delta, anything newer
        return []

    def finish(self) -> list[OutwardEvent]:
        """Upstream signalled completion (``message_stop`` or ``[DONE]``)."""
        if self.finished:
            return []
        self._transition_to(RelayState.FINISHED)
        return [OutwardEvent(OutwardKind.COMPLETE, GENERATION_COMPLETE)]

    def abort(self) -> None:
        if not self.finished:
            self._transition_to(RelayState.ABORTED)
