"""YAML Obfuscator — mask sensitive YAML properties, keep everything else verbatim."""

from .obfuscator import YAMLObfuscator, ObfuscatorConfig
from .rules import PropertyRuleTable, RuleTableBuilder
from .streaming import StreamingObfuscator
from .config import create_obfuscator, load_config, load_from_yaml
from .masks import all_characters, fixed_length, fixed_value, none
from .types import ObfuscationMode, PropertyRule
from .errors import (
    DocumentTooLargeError,
    DuplicateRuleError,
    MalformedInputError,
    ObfuscationError,
)

__all__ = [
    "YAMLObfuscator", "ObfuscatorConfig",
    "PropertyRuleTable", "RuleTableBuilder",
    "StreamingObfuscator",
    "create_obfuscator", "load_config", "load_from_yaml",
    "all_characters", "fixed_length", "fixed_value", "none",
    "ObfuscationMode", "PropertyRule",
    "ObfuscationError", "DuplicateRuleError", "MalformedInputError", "DocumentTooLargeError",
]
__version__ = "0.1.0"
