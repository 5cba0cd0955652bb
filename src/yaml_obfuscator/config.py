"""YAML/dict config loader for yaml-obfuscator.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    yaml_obfuscator:
      case_sensitive_by_default: true
      mappings: obfuscate          # exclude | obfuscate | inherit | inherit_overridable
      sequences: obfuscate
      max_document_size: 3145728
      malformed_yaml_warning: "<invalid YAML>"   # null to append nothing
      limit: 4096                  # null for unlimited output
      truncated_indicator: "... (total: %d)"
      properties:
        password: {}               # fixed_length mask, "***"
        apiKey:
          mask: all_characters
          mask_char: "#"
          case_sensitive: false
          mappings: inherit
        notes:
          mask: none
          sequences: exclude

``properties`` may also be a plain list of names.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any

import yaml

from .masks import mask_from_config
from .obfuscator import (
    DEFAULT_MALFORMED_YAML_WARNING,
    DEFAULT_MAX_DOCUMENT_SIZE,
    DEFAULT_TRUNCATED_INDICATOR,
    ObfuscatorConfig,
    YAMLObfuscator,
)
from .rules import PropertyRuleTable, RuleTableBuilder
from .source import DEFAULT_PREFERRED_MAX_BUFFER_SIZE
from .types import ObfuscationMode

logger = logging.getLogger(__name__)


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline).  Idempotent."""
    data = data or {}
    # Support nested under "yaml_obfuscator" key or flat
    if "yaml_obfuscator" in data:
        data = data["yaml_obfuscator"] or {}

    properties = data.get("properties") or {}
    if isinstance(properties, (list, tuple)):
        properties = {name: {} for name in properties}

    return {
        "case_sensitive_by_default": bool(data.get("case_sensitive_by_default", True)),
        "mappings": _mode(data.get("mappings", ObfuscationMode.OBFUSCATE)),
        "sequences": _mode(data.get("sequences", ObfuscationMode.OBFUSCATE)),
        "properties": {str(name): dict(spec or {}) for name, spec in properties.items()},
        "max_document_size": int(data.get("max_document_size", DEFAULT_MAX_DOCUMENT_SIZE)),
        "malformed_yaml_warning": data.get("malformed_yaml_warning", DEFAULT_MALFORMED_YAML_WARNING),
        "limit": data.get("limit"),
        "truncated_indicator": data.get("truncated_indicator", DEFAULT_TRUNCATED_INDICATOR),
        "stream_buffer_size": int(data.get("stream_buffer_size", DEFAULT_PREFERRED_MAX_BUFFER_SIZE)),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    path = Path(path).expanduser()
    with open(path, encoding="utf-8") as f:
        cfg = load_config(yaml.safe_load(f))
    logger.debug("Loaded %d properties from %s", len(cfg["properties"]), path)
    return cfg


def build_rules(config: dict[str, Any]) -> PropertyRuleTable:
    """Build the rule table described by a (raw or normalized) config."""
    cfg = load_config(config)
    builder = RuleTableBuilder(
        case_sensitive_by_default=cfg["case_sensitive_by_default"],
        for_mappings=cfg["mappings"],
        for_sequences=cfg["sequences"],
    )
    for name, spec in cfg["properties"].items():
        builder.add(
            name,
            mask_from_config(spec),
            case_sensitive=spec.get("case_sensitive"),
            for_mappings=_mode(spec["mappings"]) if "mappings" in spec else None,
            for_sequences=_mode(spec["sequences"]) if "sequences" in spec else None,
        )
    return builder.build()


def create_obfuscator(config: dict[str, Any]) -> YAMLObfuscator:
    """Create a fully configured obfuscator from a config dict."""
    cfg = load_config(config)
    limit = cfg["limit"]
    return YAMLObfuscator(ObfuscatorConfig(
        rules=build_rules(cfg),
        max_document_size=cfg["max_document_size"],
        malformed_yaml_warning=cfg["malformed_yaml_warning"],
        limit=None if limit is None else int(limit),
        truncated_indicator=cfg["truncated_indicator"],
        stream_buffer_size=cfg["stream_buffer_size"],
    ))


def _mode(value: Any) -> ObfuscationMode:
    if isinstance(value, ObfuscationMode):
        return value
    return ObfuscationMode(str(value).lower())
