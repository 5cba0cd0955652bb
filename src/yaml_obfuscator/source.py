"""Source buffers — random access to the text the tokenizer is reading.

Two variants share the ``Source`` protocol:

  - ``StringSource`` wraps an in-memory string (optionally a slice of it).
  - ``StreamSource`` tees a readable text stream: the tokenizer reads
    through it, and every chunk is kept in a buffer until it has been
    copied or masked into the output.  Once the buffer grows past its
    preferred size, the already-written prefix is dropped, so memory
    stays bounded no matter how long the document is.

Offsets passed to a source are absolute: for ``StringSource`` they index
the original string, for ``StreamSource`` they count characters from the
start of the stream.
"""

from __future__ import annotations
import io
import logging
from typing import Protocol, TextIO

from .types import MaskFn, SupportsWrite

logger = logging.getLogger(__name__)

DEFAULT_PREFERRED_MAX_BUFFER_SIZE = 64 * 1024

# Upper bound for a single read handed to the tokenizer
_READ_CHUNK_SIZE = 4096


class Source(Protocol):
    """Capabilities the rewriter needs from a source."""

    # absolute offset of the tokenizer's index 0
    mark_offset: int

    def reader(self) -> TextIO: ...
    def char_at(self, index: int) -> str: ...
    def copy_span(self, start: int, end: int, destination: SupportsWrite) -> None: ...
    def mask_span(self, start: int, end: int, mask: MaskFn, destination: SupportsWrite) -> None: ...
    def append_remainder(self, start: int, destination: SupportsWrite) -> int: ...
    def needs_truncation(self) -> bool: ...
    def truncate(self) -> None: ...


class StringSource:
    """Fully materialized input; ``text[start:end]`` is the document."""

    __slots__ = ("_text", "_end", "mark_offset")

    def __init__(self, text: str, start: int = 0, end: int | None = None) -> None:
        self._text = text
        self._end = len(text) if end is None else end
        self.mark_offset = start

    def reader(self) -> TextIO:
        return io.StringIO(self._text[self.mark_offset:self._end])

    def char_at(self, index: int) -> str:
        return self._text[index]

    def copy_span(self, start: int, end: int, destination: SupportsWrite) -> None:
        if start < end:
            destination.write(self._text[start:end])

    def mask_span(self, start: int, end: int, mask: MaskFn, destination: SupportsWrite) -> None:
        destination.write(mask(self._text[start:end]))

    def append_remainder(self, start: int, destination: SupportsWrite) -> int:
        self.copy_span(start, self._end, destination)
        return self._end

    def needs_truncation(self) -> bool:
        return False

    def truncate(self) -> None:
        pass


class StreamSource:
    """Incrementally read input with a bounded look-behind buffer."""

    __slots__ = (
        "_stream", "_buffer", "_buffer_offset", "_consumed",
        "_preferred_max_buffer_size", "mark_offset",
    )

    def __init__(
        self,
        stream: TextIO,
        *,
        preferred_max_buffer_size: int = DEFAULT_PREFERRED_MAX_BUFFER_SIZE,
    ) -> None:
        self._stream = stream
        self._buffer = ""
        self._buffer_offset = 0     # absolute offset of self._buffer[0]
        self._consumed = 0          # end of the last span written out
        self._preferred_max_buffer_size = preferred_max_buffer_size
        self.mark_offset = 0

    # ------------------------------------------------------------------
    # Reader side (used by the tokenizer)
    # ------------------------------------------------------------------

    def reader(self) -> TextIO:
        return self  # type: ignore[return-value]

    def read(self, size: int = -1) -> str:
        if size > _READ_CHUNK_SIZE:
            size = _READ_CHUNK_SIZE
        data = self._stream.read(size)
        if data:
            self._buffer += data
        return data

    # ------------------------------------------------------------------
    # Source protocol
    # ------------------------------------------------------------------

    def char_at(self, index: int) -> str:
        return self._buffer[self._relative(index)]

    def copy_span(self, start: int, end: int, destination: SupportsWrite) -> None:
        if start < end:
            destination.write(self._buffer[self._relative(start):self._relative(end)])
        self._consumed = max(self._consumed, end)

    def mask_span(self, start: int, end: int, mask: MaskFn, destination: SupportsWrite) -> None:
        destination.write(mask(self._buffer[self._relative(start):self._relative(end)]))
        self._consumed = max(self._consumed, end)

    def append_remainder(self, start: int, destination: SupportsWrite) -> int:
        """Write everything from ``start`` on, draining the underlying stream."""
        end = self._buffer_offset + len(self._buffer)
        self.copy_span(start, end, destination)
        while True:
            data = self._stream.read(_READ_CHUNK_SIZE)
            if not data:
                break
            destination.write(data)
            end += len(data)
        self._buffer = ""
        self._buffer_offset = self._consumed = end
        return end

    def needs_truncation(self) -> bool:
        return len(self._buffer) > self._preferred_max_buffer_size

    def truncate(self) -> None:
        """Drop the part of the buffer that has already been written out."""
        discard = self._consumed - self._buffer_offset
        if discard <= 0:
            return
        self._buffer = self._buffer[discard:]
        self._buffer_offset = self._consumed
        logger.debug("Truncated stream buffer, discarded characters: %d", discard)

    def _relative(self, index: int) -> int:
        relative = index - self._buffer_offset
        if relative < 0:
            raise ValueError(f"offset {index} was already discarded from the buffer")
        return relative


def skip_leading_whitespace(source: Source, start: int, end: int) -> int:
    """First offset in ``[start, end)`` that is not whitespace (or ``end``)."""
    while start < end and source.char_at(start).isspace():
        start += 1
    return start


def skip_trailing_whitespace(source: Source, start: int, end: int) -> int:
    """Offset just past the last non-whitespace character in ``[start, end)``."""
    while end > start and source.char_at(end - 1).isspace():
        end -= 1
    return end
