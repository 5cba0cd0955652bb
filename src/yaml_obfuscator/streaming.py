"""Streaming writer — collects a document written in pieces, obfuscates on close.

Event marks only make sense for a complete document, so nothing is
emitted until the writer is closed:

    with obfuscator.stream_to(sys.stdout) as w:
        for chunk in chunks:
            w.write(chunk)
    # the obfuscated document has now been written to sys.stdout

The destination is never closed.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .types import SupportsWrite

if TYPE_CHECKING:
    from .obfuscator import YAMLObfuscator


class StreamingObfuscator:
    """Write-only, file-like front end for YAMLObfuscator."""

    __slots__ = ("_obfuscator", "_destination", "_chunks", "_closed")

    def __init__(self, obfuscator: YAMLObfuscator, destination: SupportsWrite) -> None:
        self._obfuscator = obfuscator
        self._destination = destination
        self._chunks: list[str] = []
        self._closed = False

    def write(self, chunk: str) -> int:
        """Cache a chunk; returns the number of characters accepted."""
        if self._closed:
            raise ValueError("write to closed StreamingObfuscator")
        self._chunks.append(chunk)
        return len(chunk)

    def flush(self) -> None:
        # nothing can be emitted before the document is complete
        pass

    def close(self) -> None:
        """Obfuscate everything written so far into the destination."""
        if self._closed:
            return
        self._closed = True
        text = "".join(self._chunks)
        self._chunks.clear()
        self._obfuscator.obfuscate_text_to(text, self._destination)

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> StreamingObfuscator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
