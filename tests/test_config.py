"""Tests for the config loader and the CLI."""

import io
import json
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import pytest

from yaml_obfuscator import (
    ObfuscationMode,
    create_obfuscator,
    fixed_length,
    load_config,
    load_from_yaml,
)
from yaml_obfuscator.cli import main
from yaml_obfuscator.config import build_rules
from yaml_obfuscator.masks import AllCharacters


CONFIG_YAML = """\
yaml_obfuscator:
  mappings: inherit_overridable
  limit: 100
  properties:
    password: {}
    apiKey:
      mask: all_characters
      mask_char: "#"
      case_sensitive: false
    notes:
      mask: none
      sequences: EXCLUDE
"""


# ── load_config ──────────────────────────────────────────────────────

def test_defaults():
    cfg = load_config(None)
    assert cfg["properties"] == {}
    assert cfg["case_sensitive_by_default"] is True
    assert cfg["mappings"] is ObfuscationMode.OBFUSCATE
    assert cfg["sequences"] is ObfuscationMode.OBFUSCATE
    assert cfg["max_document_size"] == 3 * 1024 * 1024
    assert cfg["malformed_yaml_warning"] == "<invalid YAML>"
    assert cfg["limit"] is None
    assert cfg["truncated_indicator"] == "... (total: %d)"
    assert cfg["stream_buffer_size"] == 64 * 1024


def test_wrapper_key_and_flat_are_equivalent():
    flat = {"properties": ["password"], "limit": 5}
    assert load_config({"yaml_obfuscator": flat}) == load_config(flat)


def test_properties_list():
    cfg = load_config({"properties": ["password", "token"]})
    assert cfg["properties"] == {"password": {}, "token": {}}


def test_modes_are_case_insensitive():
    cfg = load_config({"mappings": "INHERIT", "sequences": "Exclude"})
    assert cfg["mappings"] is ObfuscationMode.INHERIT
    assert cfg["sequences"] is ObfuscationMode.EXCLUDE


def test_invalid_mode_raises():
    with pytest.raises(ValueError):
        load_config({"mappings": "bogus"})


def test_load_config_is_idempotent():
    cfg = load_config({"properties": {"password": {"mask": "none"}}, "mappings": "inherit"})
    assert load_config(cfg) == cfg


def test_null_warning_is_kept():
    assert load_config({"malformed_yaml_warning": None})["malformed_yaml_warning"] is None


# ── build_rules / create_obfuscator ──────────────────────────────────

def test_load_from_yaml(tmp_path):
    path = tmp_path / "obfuscator.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    cfg = load_from_yaml(path)
    assert cfg["limit"] == 100
    rules = build_rules(cfg)
    assert len(rules) == 3
    assert rules.lookup("password").mask == fixed_length()
    assert rules.lookup("password").for_mappings is ObfuscationMode.INHERIT_OVERRIDABLE
    assert rules.lookup("APIKEY").mask == AllCharacters("#")
    assert rules.lookup("notes").for_sequences is ObfuscationMode.EXCLUDE
    assert not rules.lookup("notes").performs_masking


def test_create_obfuscator_end_to_end():
    ob = create_obfuscator({
        "properties": {
            "password": {},
            "apiKey": {"mask": "all_characters", "mask_char": "#", "case_sensitive": False},
        },
    })
    assert ob.obfuscate_text("password: secret\napikey: abcd\n") == "password: ***\napikey: ####\n"


def test_create_obfuscator_without_warning():
    ob = create_obfuscator({"properties": ["password"], "malformed_yaml_warning": None})
    doc = 'name: alice\npassword: secret\nnote: "unterminated\n'
    assert ob.obfuscate_text(doc) == "name: alice\npassword: ***"


def test_create_obfuscator_with_limit():
    ob = create_obfuscator({"properties": ["password"], "limit": "4"})
    assert ob.config.limit == 4
    assert ob.obfuscate_text("name: x\n") == "name... (total: 8)"


def test_invalid_truncated_indicator_raises():
    with pytest.raises(ValueError):
        create_obfuscator({"properties": ["password"], "truncated_indicator": "[cut]"})


def test_invalid_mask_raises():
    with pytest.raises(ValueError):
        create_obfuscator({"properties": {"password": {"mask": "rot13"}}})


# ── CLI ──────────────────────────────────────────────────────────────

def test_cli_obfuscate_file(tmp_path, capsys):
    path = tmp_path / "settings.yaml"
    path.write_text("user: bob\npassword: hunter2\n", encoding="utf-8")
    main(["--property", "password", "obfuscate", str(path)])
    assert capsys.readouterr().out == "user: bob\npassword: ***\n"


def test_cli_obfuscate_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("token: abc\nname: x\n"))
    main(["--property", "token", "obfuscate"])
    assert capsys.readouterr().out == "token: ***\nname: x\n"


def test_cli_config_file(tmp_path, capsys):
    config = tmp_path / "obfuscator.yaml"
    config.write_text(CONFIG_YAML, encoding="utf-8")
    path = tmp_path / "settings.yaml"
    path.write_text("APIKEY: abc\nnotes: keep\n", encoding="utf-8")
    main(["--config", str(config), "obfuscate", str(path)])
    assert capsys.readouterr().out == "APIKEY: ###\nnotes: keep\n"


def test_cli_limit_and_no_warning(tmp_path, capsys):
    path = tmp_path / "settings.yaml"
    path.write_text("password: [unterminated\n", encoding="utf-8")
    main(["--property", "password", "--no-warning", "obfuscate", str(path)])
    assert capsys.readouterr().out == "password: "

    path.write_text("name: alice\n", encoding="utf-8")
    main(["--limit", "4", "obfuscate", str(path)])
    assert capsys.readouterr().out == "name... (total: 12)"


def test_cli_rules(capsys):
    main(["--property", "password", "rules"])
    rules = json.loads(capsys.readouterr().out)
    assert rules == [{
        "name": "password",
        "case_sensitive": True,
        "mask": "FixedLength(length=3, mask_char='*')",
        "mappings": "obfuscate",
        "sequences": "obfuscate",
    }]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
