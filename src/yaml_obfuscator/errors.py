"""Error hierarchy."""

from __future__ import annotations


class ObfuscationError(Exception):
    """Root of all errors raised by this package."""


class DuplicateRuleError(ObfuscationError, ValueError):
    """A property was registered twice with the same case sensitivity."""

    def __init__(self, name: str, case_sensitive: bool) -> None:
        kind = "case sensitive" if case_sensitive else "case insensitive"
        super().__init__(f"duplicate {kind} property: {name!r}")
        self.name = name
        self.case_sensitive = case_sensitive


class MalformedInputError(ObfuscationError):
    """The YAML tokenizer rejected the input.

    Raised while pulling events; the obfuscator catches it and degrades
    to partial output instead of propagating it.
    """


class DocumentTooLargeError(MalformedInputError):
    """More characters were read than the configured maximum document size."""

    def __init__(self, max_size: int) -> None:
        super().__init__(f"document exceeds the maximum size of {max_size} characters")
        self.max_size = max_size
