"""Incremental byte-to-line buffering for the upstream event stream."""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterator

logger = logging.getLogger(__name__)


class LineBuffer:
    """Accumulates raw chunks and yields complete ``\\n``-terminated lines.

    Lines come out stripped of surrounding whitespace (so ``\\r\\n`` framing
    works too); blank lines are yielded as ``""``.  Text after the last
    newline stays buffered until a later chunk completes it.

    Decoding is incremental, so a multi-byte character split across two
    chunks is reassembled.  A chunk that is not valid UTF-8 is dropped whole
    and the stream carries on with the next one; a broken sequence left over
    from the previous chunk costs only those leftover bytes.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buf = ""
        self._scan_from = 0  # everything before this offset has no newline

    @property
    def pending(self) -> str:
        """Unterminated text waiting for its newline."""
        return self._buf

    def feed(self, chunk: bytes) -> Iterator[str]:
        """Add *chunk* and return an iterator over the lines it completes.

        The chunk is consumed immediately; iterating is lazy.  Lines not
        pulled from the iterator remain available to later iterators.
        """
        try:
            text = self._decoder.decode(chunk)
        except UnicodeDecodeError as e:
            # A dangling lead byte from the previous chunk may be the culprit;
            # drop it and give this chunk a chance on its own.
            self._decoder.reset()
            try:
                text = self._decoder.decode(chunk)
            except UnicodeDecodeError:
                logger.error("Invalid UTF-8 in chunk (%d bytes skipped): %s", len(chunk), e)
                self._decoder.reset()
                return iter(())
            logger.warning("Dropped incomplete UTF-8 sequence before chunk: %s", e)
        self._buf += text
        return self._drain()

    def _drain(self) -> Iterator[str]:
        while True:
            idx = self._buf.find("\n", self._scan_from)
            if idx == -1:
                self._scan_from = len(self._buf)
                return
            line = self._buf[:idx]
            self._buf = self._buf[idx + 1:]
            self._scan_from = 0
            yield line.strip()
