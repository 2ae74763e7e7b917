"""Repeatable body streams for request payloads.

The transport may need to read a request body more than once (signing,
retries). ``new_repeatable_stream`` wraps a caller stream so it can be
rewound: seekable streams are rewound in place, anything else is buffered in
memory once.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from typing import BinaryIO

logger = logging.getLogger(__name__)

# Streaming chunk size: 64 KB
_CHUNK_SIZE = 64 * 1024


class RepeatableStream:
    """A read-only view of a stream that can be reset to its start.

    Attributes:
        limit: Maximum number of bytes exposed, or None for everything up to
            EOF of the underlying stream.
    """

    def __init__(self, source: BinaryIO, mark: int, limit: int | None = None) -> None:
        self._source = source
        self._mark = mark
        self.limit = limit
        self._consumed = 0

    def read(self, size: int = -1) -> bytes:
        remaining = None if self.limit is None else self.limit - self._consumed
        if remaining is not None:
            if remaining <= 0:
                return b""
            if size < 0 or size > remaining:
                size = remaining
        data = self._source.read(size)
        self._consumed += len(data)
        return data

    def reset(self) -> None:
        """Rewind to the position the stream had when it was wrapped."""
        self._source.seek(self._mark)
        self._consumed = 0

    def iter_chunks(self, chunk_size: int = _CHUNK_SIZE) -> Iterator[bytes]:
        """Reset, then yield the stream contents in chunks."""
        self.reset()
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                break
            yield chunk

    def __iter__(self) -> Iterator[bytes]:
        return self.iter_chunks()


def new_repeatable_stream(stream: BinaryIO, limit: int | None = None) -> RepeatableStream:
    """Wrap ``stream`` so it can be read repeatedly.

    Args:
        stream: The caller's binary stream, positioned at the first byte to send.
        limit: Read at most this many bytes from ``stream``.

    Returns:
        A RepeatableStream over the same bytes.

    Raises:
        OSError: If reading or seeking the source stream fails. Any partially
            buffered data is discarded.
    """
    if isinstance(stream, RepeatableStream):
        return stream

    seekable = getattr(stream, "seekable", None)
    if seekable is not None and seekable():
        return RepeatableStream(stream, stream.tell(), limit)

    buffer = io.BytesIO()
    try:
        remaining = limit
        while remaining is None or remaining > 0:
            size = _CHUNK_SIZE if remaining is None else min(_CHUNK_SIZE, remaining)
            chunk = stream.read(size)
            if not chunk:
                break
            buffer.write(chunk)
            if remaining is not None:
                remaining -= len(chunk)
    except OSError:
        buffer.close()
        raise

    logger.debug("Buffered %d bytes of non-seekable body stream", buffer.tell())
    buffer.seek(0)
    return RepeatableStream(buffer, 0, limit)
