"""Event source — PyYAML's event parser behind a size guard.

Only the structural events and their marks are used; nothing is
constructed, so tags, types and duplicate keys are irrelevant here.
"""

from __future__ import annotations
from typing import Generator, TextIO

import yaml

from .errors import DocumentTooLargeError, MalformedInputError


class _SizeLimitedReader:
    """Fails the parse once more than ``max_size`` characters were read."""

    __slots__ = ("_stream", "_max_size", "_read")

    name = "<yaml>"

    def __init__(self, stream: TextIO, max_size: int) -> None:
        self._stream = stream
        self._max_size = max_size
        self._read = 0

    def read(self, size: int = -1) -> str:
        data = self._stream.read(size)
        self._read += len(data)
        if self._read > self._max_size:
            raise DocumentTooLargeError(self._max_size)
        return data


def parse_events(
    reader: TextIO,
    *,
    max_document_size: int | None = None,
) -> Generator[yaml.Event, None, None]:
    """Yield parse events lazily, turning tokenizer failures into MalformedInputError."""
    stream = reader if max_document_size is None else _SizeLimitedReader(reader, max_document_size)
    try:
        # the pure-Python loader; its marks index characters, not bytes
        yield from yaml.parse(stream, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise MalformedInputError(str(exc)) from exc
