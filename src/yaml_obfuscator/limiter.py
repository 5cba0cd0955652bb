"""Output limiter — caps how much text reaches the destination."""

from __future__ import annotations

from .types import SupportsWrite


class LimitedWriter:
    """Passes writes through until ``limit`` characters were written.

    Later writes are dropped but still counted, so ``total`` reports the
    length the output would have had without the cap.
    """

    __slots__ = ("_destination", "_limit", "_written", "total")

    def __init__(self, destination: SupportsWrite, limit: int | None = None) -> None:
        self._destination = destination
        self._limit = limit
        self._written = 0
        self.total = 0

    def write(self, s: str) -> int:
        self.total += len(s)
        if self._limit is None:
            self._destination.write(s)
            self._written += len(s)
        elif self._written < self._limit:
            part = s[:self._limit - self._written]
            self._destination.write(part)
            self._written += len(part)
        return len(s)

    @property
    def limit_reached(self) -> bool:
        return self._limit is not None and self._written >= self._limit

    @property
    def truncated(self) -> bool:
        return self._limit is not None and self.total > self._limit
