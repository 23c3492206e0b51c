"""Upstream event-stream framing: ``data:`` payload extraction and decoding."""

from __future__ import annotations

import json
import logging

from ..types import StreamingEvent

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_payload(line: str) -> str | None:
    """Return the payload of a ``data: `` line, or None for any other line.

    ``event:``, ``id:``, comment lines and blanks all return None; the
    payload is fully described by its JSON ``type`` field.
    """
    if not line or not line.startswith(DATA_PREFIX):
        return None
    return line[len(DATA_PREFIX):]


def is_done(payload: str) -> bool:
    return payload == DONE_SENTINEL


def decode_event(payload: str) -> StreamingEvent | None:
    """Decode a payload into a ``StreamingEvent``.

    Returns None for anything that isn't a JSON object with a string
    ``type``.  Never raises.
    """
    try:
        raw = json.loads(payload)
    except (ValueError, RecursionError) as e:
        # ValueError also covers the int digit limit; deep nesting recurses
        logger.debug("Could not parse streaming event: %s (data: %s)", e, payload)
        return None
    if not isinstance(raw, dict):
        logger.debug("Ignoring non-object streaming payload: %s", payload)
        return None
    try:
        return StreamingEvent.from_dict(raw)
    except ValueError as e:
        logger.debug("Could not parse streaming event: %s (data: %s)", e, payload)
        return None
