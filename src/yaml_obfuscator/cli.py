"""CLI interface for yaml-obfuscator.

Usage:
    # Obfuscate a file (or stdin) to stdout
    yaml-obfuscator --config obfuscator.yaml obfuscate settings.yaml
    cat settings.yaml | yaml-obfuscator --property password --property token obfuscate

    # Show the configured property rules
    yaml-obfuscator --config obfuscator.yaml rules

The config file format is documented in ``yaml_obfuscator.config``.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys

from .config import build_rules, create_obfuscator, load_config, load_from_yaml
from .masks import describe
from .obfuscator import YAMLObfuscator


DEFAULT_CONFIG = os.environ.get("YAML_OBFUSCATOR_CONFIG")


def _build_config(args: argparse.Namespace) -> dict:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    for name in args.property:
        cfg["properties"].setdefault(name, {})
    if args.limit is not None:
        cfg["limit"] = args.limit
    if args.no_warning:
        cfg["malformed_yaml_warning"] = None
    return cfg


def _build_obfuscator(args: argparse.Namespace) -> YAMLObfuscator:
    return create_obfuscator(_build_config(args))


def cmd_obfuscate(args: argparse.Namespace) -> None:
    """Obfuscate a YAML file (or stdin) to stdout."""
    obfuscator = _build_obfuscator(args)
    if args.file and args.file != "-":
        with open(args.file, encoding="utf-8") as f:
            obfuscator.obfuscate_stream(f, sys.stdout)
    else:
        obfuscator.obfuscate_stream(sys.stdin, sys.stdout)
    sys.stdout.flush()


def cmd_rules(args: argparse.Namespace) -> None:
    """Dump the configured property rules as JSON."""
    rules = build_rules(_build_config(args))
    output = [
        {
            "name": name,
            "case_sensitive": case_sensitive,
            "mask": describe(rule.mask),
            "mappings": rule.for_mappings.value,
            "sequences": rule.for_sequences.value,
        }
        for name, case_sensitive, rule in rules.entries()
    ]
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="yaml-obfuscator",
        description="Mask sensitive YAML properties while keeping the document intact",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="YAML config file")
    parser.add_argument(
        "--property", action="append", default=[],
        help="Property to obfuscate with the default mask (repeatable)",
    )
    parser.add_argument("--limit", type=int, default=None, help="Maximum output length")
    parser.add_argument("--no-warning", action="store_true", help="Append nothing on malformed YAML")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    p_obfuscate = sub.add_parser("obfuscate", help="Obfuscate a YAML document")
    p_obfuscate.add_argument("file", nargs="?", help="Input file (default: stdin)")
    sub.add_parser("rules", help="Dump configured property rules")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cmds = {
        "obfuscate": cmd_obfuscate,
        "rules": cmd_rules,
    }
    cmds[args.command](args)


if __name__ == "__main__":
    main()
