"""Incremental splitting of a status dump stream into records.

The segmenter pulls chunks from an async byte reader only when no record
boundary is visible in the unconsumed buffer, so memory stays bounded by the
size of a single record plus one chunk.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .interval import IntervalFilter
from .models import Layout, RawRecord

logger = logging.getLogger(__name__)

# Last variable of SHOW GLOBAL STATUS; its line closes a batch sample.
END_STRING = "Uptime_since_flush_status"
TABULAR_MARKER = b"| Variable_name"
DEFAULT_CHUNK_SIZE = 64 * 1024


class AsyncByteReader(Protocol):
    """Anything with an awaitable ``read`` returning bytes (b"" at EOF)."""

    async def read(self, n: int = -1) -> bytes:
        ...


def detect_layout(chunk: bytes) -> Layout:
    """Classify a stream by its first bytes."""
    if chunk.startswith((b"+", b"|")):
        return Layout.TABULAR
    return Layout.BATCH


class RecordSegmenter:
    """Async iterator of RawRecords read from a status dump stream.

    The layout is decided on the first non-empty chunk and kept for the
    whole stream. Not restartable.
    """

    def __init__(
        self,
        stream: AsyncByteReader,
        *,
        end_marker: str | bytes = END_STRING,
        interval_filter: IntervalFilter | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")
        if isinstance(end_marker, str):
            end_marker = end_marker.encode()
        if not end_marker:
            raise ValueError("end_marker must not be empty")

        self._stream = stream
        self._end_marker = end_marker
        self._filter = interval_filter
        self._chunk_size = chunk_size

        self._buf = bytearray()
        self._eof = False
        self.layout: Layout | None = None
        self.marker: bytes | None = None
        self.skipped = 0

    def __aiter__(self) -> RecordSegmenter:
        return self

    async def __anext__(self) -> RawRecord:
        while True:
            if self.layout is not None:
                record = self._next_record()
                if record is not None:
                    return record
            if self._eof:
                return self._flush()
            await self._fill()

    async def _fill(self) -> None:
        """Read one more chunk into the buffer."""
        chunk = await self._stream.read(self._chunk_size)
        if not chunk:
            self._eof = True
            return
        if self.layout is None:
            self._classify(chunk)
        self._buf += chunk

    def _classify(self, chunk: bytes) -> None:
        self.layout = detect_layout(chunk)
        if self.layout is Layout.TABULAR:
            self.marker = TABULAR_MARKER
        else:
            self.marker = self._end_marker
        logger.debug("Detected %s layout (marker=%r)", self.layout.value, self.marker)

    def _next_record(self) -> RawRecord | None:
        """Consume buffered data up to the next emittable record, if one is complete."""
        while True:
            end = self._buf.find(self.marker)
            if end < 0:
                return None

            nl = self._buf.find(b"\n", end)
            if nl >= 0:
                consumed = nl + 1
            elif self._eof:
                consumed = len(self._buf)
            else:
                # marker line is still incomplete
                return None

            preamble = bytes(self._buf[:end])
            del self._buf[:consumed]

            # Marker leads the buffer: skip its line, nothing to emit.
            if end == 0:
                continue

            if self._filter is not None and self._filter.skippable(preamble):
                self.skipped += 1
                continue

            return RawRecord(data=preamble, layout=self.layout)

    def _flush(self) -> RawRecord:
        """Emit whatever is left at EOF as the final record."""
        if not self._buf or self.layout is None:
            raise StopAsyncIteration
        data = bytes(self._buf)
        self._buf.clear()
        # an unterminated record is still subject to throttling
        if self._filter is not None and self._filter.skippable(data):
            self.skipped += 1
            raise StopAsyncIteration
        return RawRecord(data=data, layout=self.layout)
