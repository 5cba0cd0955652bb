"""Property rule table — maps field names to how their values are obfuscated.

Usage:
    from yaml_obfuscator import RuleTableBuilder, fixed_length

    rules = (
        RuleTableBuilder()
        .add("password", fixed_length(3))
        .add("apiKey", fixed_length(3), case_sensitive=False)
        .build()
    )
    rules.lookup("APIKEY")   # PropertyRule(...)

The built table is immutable and safe to share between threads.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Iterator, Mapping

from .errors import DuplicateRuleError
from .types import MaskFn, ObfuscationMode, PropertyRule


class PropertyRuleTable:
    """Immutable name → rule lookup with per-entry case sensitivity."""

    __slots__ = ("_case_sensitive", "_case_insensitive")

    def __init__(
        self,
        case_sensitive: Mapping[str, PropertyRule] | None = None,
        case_insensitive: Mapping[str, PropertyRule] | None = None,
    ) -> None:
        self._case_sensitive = MappingProxyType(dict(case_sensitive or {}))
        # keys are stored case-folded
        self._case_insensitive = MappingProxyType(
            {name.casefold(): rule for name, rule in (case_insensitive or {}).items()}
        )

    def lookup(self, name: str) -> PropertyRule | None:
        """Return the rule for a field name, exact matches first."""
        rule = self._case_sensitive.get(name)
        if rule is None and self._case_insensitive:
            rule = self._case_insensitive.get(name.casefold())
        return rule

    def entries(self) -> Iterator[tuple[str, bool, PropertyRule]]:
        """Yield ``(name, case_sensitive, rule)`` for every entry."""
        for name, rule in self._case_sensitive.items():
            yield name, True, rule
        for name, rule in self._case_insensitive.items():
            yield name, False, rule

    def __len__(self) -> int:
        return len(self._case_sensitive) + len(self._case_insensitive)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PropertyRuleTable):
            return NotImplemented
        return (
            self._case_sensitive == other._case_sensitive
            and self._case_insensitive == other._case_insensitive
        )

    def __hash__(self) -> int:
        return hash((
            frozenset(self._case_sensitive.items()),
            frozenset(self._case_insensitive.items()),
        ))

    def __repr__(self) -> str:
        return (
            f"PropertyRuleTable(case_sensitive={dict(self._case_sensitive)!r}, "
            f"case_insensitive={dict(self._case_insensitive)!r})"
        )


class RuleTableBuilder:
    """Collects property rules, applying defaults, then builds a table."""

    def __init__(
        self,
        *,
        case_sensitive_by_default: bool = True,
        for_mappings: ObfuscationMode = ObfuscationMode.OBFUSCATE,
        for_sequences: ObfuscationMode = ObfuscationMode.OBFUSCATE,
    ) -> None:
        self.case_sensitive_by_default = case_sensitive_by_default
        self.for_mappings = for_mappings
        self.for_sequences = for_sequences
        self._case_sensitive: dict[str, PropertyRule] = {}
        self._case_insensitive: dict[str, PropertyRule] = {}

    def add(
        self,
        name: str,
        mask: MaskFn,
        *,
        case_sensitive: bool | None = None,
        for_mappings: ObfuscationMode | None = None,
        for_sequences: ObfuscationMode | None = None,
    ) -> RuleTableBuilder:
        """Register a property.  Raises DuplicateRuleError on a repeat."""
        if case_sensitive is None:
            case_sensitive = self.case_sensitive_by_default
        rule = PropertyRule(
            mask=mask,
            for_mappings=for_mappings or self.for_mappings,
            for_sequences=for_sequences or self.for_sequences,
        )
        if case_sensitive:
            target, key = self._case_sensitive, name
        else:
            target, key = self._case_insensitive, name.casefold()
        if key in target:
            raise DuplicateRuleError(name, case_sensitive)
        target[key] = rule
        return self

    def build(self) -> PropertyRuleTable:
        return PropertyRuleTable(self._case_sensitive, self._case_insensitive)
