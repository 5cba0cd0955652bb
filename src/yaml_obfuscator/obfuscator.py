"""YAMLObfuscator — the main API.

Usage:
    from yaml_obfuscator import ObfuscatorConfig, RuleTableBuilder, YAMLObfuscator, fixed_length

    rules = RuleTableBuilder().add("password", fixed_length(3)).build()
    obfuscator = YAMLObfuscator(ObfuscatorConfig(rules=rules))   # reusable, thread-safe

    obfuscator.obfuscate_text("name: alice\\npassword: secret123\\n")
    # 'name: alice\\npassword: ***\\n'

    with open("config.yaml") as f:
        obfuscator.obfuscate_stream(f, sys.stdout)   # bounded memory

Everything except the masked values is copied verbatim.  Malformed YAML
never raises: the text processed so far is kept and a warning is
appended instead of the rest of the document.
"""

from __future__ import annotations
import io
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

from .errors import MalformedInputError
from .events import parse_events
from .limiter import LimitedWriter
from .rewriter import ObfuscatingRewriter
from .rules import PropertyRuleTable
from .source import DEFAULT_PREFERRED_MAX_BUFFER_SIZE, Source, StreamSource, StringSource
from .types import SupportsWrite

if TYPE_CHECKING:
    from .streaming import StreamingObfuscator

logger = logging.getLogger(__name__)

DEFAULT_MAX_DOCUMENT_SIZE = 3 * 1024 * 1024
DEFAULT_MALFORMED_YAML_WARNING = "<invalid YAML>"
DEFAULT_TRUNCATED_INDICATOR = "... (total: %d)"


@dataclass(frozen=True)
class ObfuscatorConfig:
    """Configuration for the YAMLObfuscator."""
    rules: PropertyRuleTable = field(default_factory=PropertyRuleTable)
    max_document_size: int = DEFAULT_MAX_DOCUMENT_SIZE   # in characters
    # appended when the input is not valid YAML; None = append nothing
    malformed_yaml_warning: str | None = DEFAULT_MALFORMED_YAML_WARNING
    limit: int | None = None                             # None = unlimited output
    # printf-style, receives the untruncated length; None = no indicator
    truncated_indicator: str | None = DEFAULT_TRUNCATED_INDICATOR
    stream_buffer_size: int = DEFAULT_PREFERRED_MAX_BUFFER_SIZE

    def __post_init__(self) -> None:
        if self.max_document_size < 0:
            raise ValueError(f"max_document_size must be >= 0, got {self.max_document_size}")
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")
        if self.stream_buffer_size <= 0:
            raise ValueError(f"stream_buffer_size must be > 0, got {self.stream_buffer_size}")
        if self.truncated_indicator is not None:
            try:
                self.truncated_indicator % 0
            except (TypeError, ValueError, KeyError) as e:
                raise ValueError(
                    f"truncated_indicator must take one %-style argument: {self.truncated_indicator!r}"
                ) from e


class YAMLObfuscator:
    """Masks configured YAML properties while preserving the rest of the text."""

    def __init__(self, config: ObfuscatorConfig | None = None) -> None:
        self.config = config or ObfuscatorConfig()

    def obfuscate_text(self, text: str, start: int = 0, end: int | None = None) -> str:
        """Obfuscate ``text[start:end]`` and return the result."""
        end = _check_bounds(text, start, end)
        out = io.StringIO()
        self._obfuscate(StringSource(text, start, end), out)
        return out.getvalue()

    def obfuscate_text_to(
        self,
        text: str,
        destination: SupportsWrite,
        start: int = 0,
        end: int | None = None,
    ) -> None:
        """Obfuscate ``text[start:end]`` into ``destination``."""
        end = _check_bounds(text, start, end)
        self._obfuscate(StringSource(text, start, end), destination)

    def obfuscate_stream(self, stream: TextIO, destination: SupportsWrite) -> None:
        """Obfuscate a readable text stream.  Neither side is closed."""
        source = StreamSource(stream, preferred_max_buffer_size=self.config.stream_buffer_size)
        self._obfuscate(source, destination)

    def stream_to(self, destination: SupportsWrite) -> StreamingObfuscator:
        """Return a writer that obfuscates everything written to it on close."""
        from .streaming import StreamingObfuscator
        return StreamingObfuscator(self, destination)

    def _obfuscate(self, source: Source, destination: SupportsWrite) -> None:
        cfg = self.config
        limited = LimitedWriter(destination, cfg.limit)
        rewriter = ObfuscatingRewriter(source, limited, cfg.rules)
        events = parse_events(source.reader(), max_document_size=cfg.max_document_size)
        try:
            for event in events:
                rewriter.handle(event)
                if limited.limit_reached:
                    break
            rewriter.append_remainder()
        except MalformedInputError as e:
            logger.warning("Could not obfuscate malformed YAML: %s", e)
            if cfg.malformed_yaml_warning is not None:
                limited.write(cfg.malformed_yaml_warning)
        finally:
            events.close()

        if limited.truncated and cfg.truncated_indicator is not None:
            destination.write(cfg.truncated_indicator % limited.total)

    # ------------------------------------------------------------------
    # Value semantics
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, YAMLObfuscator):
            return NotImplemented
        return self.config == other.config

    def __hash__(self) -> int:
        return hash(self.config)

    def __repr__(self) -> str:
        return f"YAMLObfuscator({self.config!r})"


def _check_bounds(text: str, start: int, end: int | None) -> int:
    if end is None:
        end = len(text)
    if start < 0 or end > len(text) or start > end:
        raise IndexError(f"invalid range [{start}, {end}) for text of length {len(text)}")
    return end
