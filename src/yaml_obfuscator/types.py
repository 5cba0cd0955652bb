"""Core types."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

MaskFn = Callable[[str], str]


class SupportsWrite(Protocol):
    """Anything text can be appended to (files, ``io.StringIO``, writers)."""
    def write(self, s: str, /) -> object: ...


class ObfuscationMode(Enum):
    """How a mapping or sequence found under a matched property is treated."""
    EXCLUDE = "exclude"                          # recurse, apply per-field rules
    OBFUSCATE = "obfuscate"                      # mask the whole structure at once
    INHERIT = "inherit"                          # mask every nested scalar
    INHERIT_OVERRIDABLE = "inherit_overridable"  # same, unless a nested field has a rule


@dataclass(frozen=True, slots=True)
class PropertyRule:
    """How to obfuscate the value of a single property."""
    mask: MaskFn
    for_mappings: ObfuscationMode = ObfuscationMode.OBFUSCATE
    for_sequences: ObfuscationMode = ObfuscationMode.OBFUSCATE

    @property
    def performs_masking(self) -> bool:
        return getattr(self.mask, "performs_masking", True)
