"""Built-in mask functions.

A mask is any ``Callable[[str], str]`` that turns the text of a redacted
span into its replacement.  The helpers here cover the common cases and
are frozen dataclasses so obfuscators built from them compare equal.

``none()`` is special: it returns its input unchanged and reports
``performs_masking = False``, which the rewriter uses to skip work that
would not change the output.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, ClassVar

from .types import MaskFn


@dataclass(frozen=True, slots=True)
class FixedLength:
    """Replace any span with ``length`` copies of ``mask_char``."""
    length: int = 3
    mask_char: str = "*"
    performs_masking: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")
        _check_mask_char(self.mask_char)

    def __call__(self, text: str) -> str:
        return self.mask_char * self.length


@dataclass(frozen=True, slots=True)
class AllCharacters:
    """Replace every character of the span, keeping its length."""
    mask_char: str = "*"
    performs_masking: ClassVar[bool] = True

    def __post_init__(self) -> None:
        _check_mask_char(self.mask_char)

    def __call__(self, text: str) -> str:
        return self.mask_char * len(text)


@dataclass(frozen=True, slots=True)
class FixedValue:
    """Replace any span with a constant."""
    value: str
    performs_masking: ClassVar[bool] = True

    def __call__(self, text: str) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class NoMask:
    """Leave the span as-is."""
    performs_masking: ClassVar[bool] = False

    def __call__(self, text: str) -> str:
        return text


def fixed_length(length: int = 3, mask_char: str = "*") -> FixedLength:
    return FixedLength(length, mask_char)


def all_characters(mask_char: str = "*") -> AllCharacters:
    return AllCharacters(mask_char)


def fixed_value(value: str) -> FixedValue:
    return FixedValue(value)


def none() -> NoMask:
    return NoMask()


def mask_from_config(spec: dict[str, Any]) -> MaskFn:
    """Build a mask from a property spec, e.g. ``{"mask": "fixed_length", "length": 5}``."""
    kind = str(spec.get("mask", "fixed_length")).lower()
    if kind == "fixed_length":
        return FixedLength(int(spec.get("length", 3)), spec.get("mask_char", "*"))
    if kind == "all_characters":
        return AllCharacters(spec.get("mask_char", "*"))
    if kind == "fixed_value":
        if "value" not in spec:
            raise ValueError("fixed_value mask requires a 'value'")
        return FixedValue(str(spec["value"]))
    if kind == "none":
        return NoMask()
    raise ValueError(f"unknown mask: {kind!r}")


def describe(mask: MaskFn) -> str:
    """Short human-readable name for a mask (used by the CLI rule dump)."""
    if isinstance(mask, (FixedLength, AllCharacters, FixedValue, NoMask)):
        return repr(mask)
    return getattr(mask, "__qualname__", repr(mask))


def _check_mask_char(mask_char: str) -> None:
    if len(mask_char) != 1:
        raise ValueError(f"mask_char must be a single character, got {mask_char!r}")
