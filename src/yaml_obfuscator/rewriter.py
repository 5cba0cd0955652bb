"""Obfuscating rewriter — replays parse events as an edited copy of the source.

The rewriter never re-serializes YAML.  It walks the event stream,
keeping a cursor into the original text, and for every event decides
whether the text up to that event is copied verbatim or whether a span
is handed to a mask function.  Everything that is not masked comes out
byte-for-byte identical.

State is held in two stacks:

  - the structure stack (stream / document / mapping / sequence), which
    tells field names apart from values: PyYAML reports both as scalar
    events, so a scalar is a field name only when the innermost open
    structure is a mapping that is waiting for its next key;
  - the frame stack, one frame per matched property that is still in
    effect.  Only the top frame is consulted; a nested field may push a
    new frame over an ``INHERIT_OVERRIDABLE`` one.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

import yaml

from .rules import PropertyRuleTable
from .source import Source, skip_leading_whitespace, skip_trailing_whitespace
from .types import MaskFn, ObfuscationMode, PropertyRule, SupportsWrite

_QUOTE_STYLES = ("'", '"')


class StructureKind(Enum):
    STREAM = "stream"
    DOCUMENT = "document"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


@dataclass(slots=True)
class _Structure:
    kind: StructureKind
    awaiting_key: bool = True  # only meaningful for mappings


@dataclass(slots=True)
class _RedactionFrame:
    rule: PropertyRule
    # set once the governed value turns out to be a mapping or sequence
    kind: StructureKind | None = None
    mode: ObfuscationMode | None = None
    start_index: int = 0
    depth: int = 0

    def allows_overriding(self) -> bool:
        return self.mode is ObfuscationMode.INHERIT_OVERRIDABLE

    def masks_structure(self) -> bool:
        return self.rule.performs_masking and self.mode is ObfuscationMode.OBFUSCATE

    def masks_scalar(self) -> bool:
        # EXCLUDE never gets here, the frame is dropped when the structure opens
        return self.rule.performs_masking and (
            self.depth == 0 or self.mode is not ObfuscationMode.OBFUSCATE
        )


class ObfuscatingRewriter:
    """Consumes parse events one at a time and writes the rewritten text."""

    def __init__(self, source: Source, destination: SupportsWrite, rules: PropertyRuleTable) -> None:
        self._source = source
        self._destination = destination
        self._rules = rules
        self._offset = source.mark_offset
        self._cursor = source.mark_offset
        self._structures: list[_Structure] = []
        self._frames: list[_RedactionFrame] = []

    @property
    def cursor(self) -> int:
        return self._cursor

    def handle(self, event: yaml.Event) -> None:
        if isinstance(event, yaml.ScalarEvent):
            self._scalar(event)
        elif isinstance(event, yaml.MappingStartEvent):
            self._start_collection(event, StructureKind.MAPPING)
        elif isinstance(event, yaml.MappingEndEvent):
            self._end_collection(event, StructureKind.MAPPING)
        elif isinstance(event, yaml.SequenceStartEvent):
            self._start_collection(event, StructureKind.SEQUENCE)
        elif isinstance(event, yaml.SequenceEndEvent):
            self._end_collection(event, StructureKind.SEQUENCE)
        elif isinstance(event, yaml.AliasEvent):
            self._alias()
        elif isinstance(event, yaml.DocumentStartEvent):
            self._structures.append(_Structure(StructureKind.DOCUMENT))
        elif isinstance(event, yaml.StreamStartEvent):
            self._structures.append(_Structure(StructureKind.STREAM))
        elif isinstance(event, (yaml.DocumentEndEvent, yaml.StreamEndEvent)):
            self._structures.pop()

    def append_remainder(self) -> None:
        """Copy the untouched tail of the source; call after the last event."""
        self._cursor = self._source.append_remainder(self._cursor, self._destination)

    # ------------------------------------------------------------------
    # Structures
    # ------------------------------------------------------------------

    def _start_collection(self, event: yaml.Event, kind: StructureKind) -> None:
        self._structures.append(_Structure(kind))
        frame = self._current_frame()
        if frame is None:
            return
        if frame.depth == 0:
            mode = frame.rule.for_mappings if kind is StructureKind.MAPPING else frame.rule.for_sequences
            if mode is ObfuscationMode.EXCLUDE:
                # not obfuscated as a whole; the structure belongs to the enclosing frame
                self._frames.pop()
                frame = self._current_frame()
                if frame is not None and frame.kind is kind:
                    frame.depth += 1
                return
            self._copy_until(self._start_index(event))
            frame.kind = kind
            frame.mode = mode
            frame.start_index = self._start_index(event)
            frame.depth = 1
        elif frame.kind is kind:
            frame.depth += 1

    def _end_collection(self, event: yaml.Event, kind: StructureKind) -> None:
        self._structures.pop()
        frame = self._current_frame()
        if frame is not None and frame.depth > 0 and frame.kind is kind:
            frame.depth -= 1
            if frame.depth == 0:
                if frame.masks_structure():
                    self._mask_until(frame.start_index, self._end_index(event), frame.rule.mask)
                self._frames.pop()
        self._node_completed()

    def _alias(self) -> None:
        frame = self._current_frame()
        if frame is not None and frame.depth == 0:
            # an alias is never masked, so the property has nothing left to govern
            self._frames.pop()
        self._node_completed()

    def _node_completed(self) -> None:
        if self._structures and self._structures[-1].kind is StructureKind.MAPPING:
            structure = self._structures[-1]
            structure.awaiting_key = not structure.awaiting_key

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def _scalar(self, event: yaml.ScalarEvent) -> None:
        structure = self._structures[-1] if self._structures else None
        is_field_name = (
            structure is not None
            and structure.kind is StructureKind.MAPPING
            and structure.awaiting_key
        )
        self._node_completed()
        if is_field_name:
            self._field_name(event)
        else:
            self._scalar_value(event)

    def _field_name(self, event: yaml.ScalarEvent) -> None:
        frame = self._current_frame()
        if frame is None or frame.allows_overriding():
            rule = self._rules.lookup(event.value)
            if rule is not None:
                self._frames.append(_RedactionFrame(rule))
        # with no whole-structure mask pending, everything before this key is final
        if frame is None or not frame.masks_structure():
            self._release_buffer(event)

    def _scalar_value(self, event: yaml.ScalarEvent) -> None:
        frame = self._current_frame()
        if frame is None:
            return
        if frame.masks_scalar():
            self._copy_until(self._start_index(event))
            self._mask_scalar(event, frame.rule.mask)
        if frame.depth == 0:
            self._frames.pop()

    def _mask_scalar(self, event: yaml.ScalarEvent, mask: MaskFn) -> None:
        start = self._start_index(event)
        end = self._end_index(event)
        if event.anchor is not None or event.tag is not None:
            value_start = self._skip_node_properties(start, end)
            self._source.copy_span(start, value_start, self._destination)
            start = value_start
        # block scalars end after their trailing line breaks
        end = skip_trailing_whitespace(self._source, start, end)

        if event.style in _QUOTE_STYLES and end - start >= 2:
            self._source.copy_span(start, start + 1, self._destination)
            self._source.mask_span(start + 1, end - 1, mask, self._destination)
            self._source.copy_span(end - 1, end, self._destination)
        else:
            self._source.mask_span(start, end, mask, self._destination)
        self._cursor = end

    def _skip_node_properties(self, start: int, end: int) -> int:
        """Skip ``&anchor`` and ``!tag`` tokens and the whitespace after them."""
        index = start
        while index < end and self._source.char_at(index) in "&!":
            while index < end and not self._source.char_at(index).isspace():
                index += 1
            index = skip_leading_whitespace(self._source, index, end)
        return index

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def _copy_until(self, index: int) -> None:
        self._source.copy_span(self._cursor, index, self._destination)
        self._cursor = index

    def _mask_until(self, start: int, end: int, mask: MaskFn) -> None:
        # trailing whitespace stays, so the next token keeps its position
        end = skip_trailing_whitespace(self._source, start, end)
        self._source.mask_span(start, end, mask, self._destination)
        self._cursor = end

    def _release_buffer(self, event: yaml.Event) -> None:
        if self._source.needs_truncation():
            self._copy_until(self._start_index(event))
            self._source.truncate()

    def _current_frame(self) -> _RedactionFrame | None:
        return self._frames[-1] if self._frames else None

    def _start_index(self, event: yaml.Event) -> int:
        return self._offset + event.start_mark.index

    def _end_index(self, event: yaml.Event) -> int:
        return self._offset + event.end_mark.index
