"""CLI interface for doc-redactor.

Usage:
    # List findings (stdout: JSON array of {"type", "value"})
    echo 'Mail jane@acme.com, MRN- 998877' | python -m doc_redactor.cli detect

    # Redact (stdout: JSON with redacted text, counts and totals)
    python -m doc_redactor.cli redact --input report.txt

    # Redact and print only the redacted text
    python -m doc_redactor.cli --no-header redact-text < report.txt
"""

from __future__ import annotations
import argparse
import json
import logging
import sys

from .config import create_redactor, load_config, load_from_yaml
from .patterns import detect
from .redactor import Redactor


def _read_input(args: argparse.Namespace) -> str:
    if args.input and args.input != "-":
        with open(args.input, encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _build_redactor(args: argparse.Namespace) -> Redactor:
    raw = load_from_yaml(args.config) if args.config else load_config({})
    if args.no_header:
        raw["add_header"] = False
    if args.skip_types:
        raw["skip_types"] |= load_config(
            {"skip_types": _split_list(args.skip_types)}
        )["skip_types"]
    if args.allow_list:
        raw["allow_list"] |= set(_split_list(args.allow_list))
    return create_redactor(raw)


def cmd_detect(args: argparse.Namespace) -> None:
    """Print detected identifiers as JSON."""
    text = _read_input(args)
    json.dump([m.to_dict() for m in detect(text)], sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def cmd_redact(args: argparse.Namespace) -> None:
    """Redact text and print the full result as JSON."""
    redactor = _build_redactor(args)
    result = redactor.redact(_read_input(args))
    json.dump(result.to_dict(), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_redact_text(args: argparse.Namespace) -> None:
    """Redact text and print only the redacted text."""
    redactor = _build_redactor(args)
    sys.stdout.write(redactor.redact(_read_input(args)).text)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="doc_redactor",
        description="Detect and redact sensitive identifiers in document text",
    )
    parser.add_argument("--input", default="-", help="Input file (default: stdin)")
    parser.add_argument("--config", default="", help="YAML config path")
    parser.add_argument("--no-header", action="store_true", help="Don't add the confidentiality banner")
    parser.add_argument("--skip-types", default="", help="Comma-separated types to leave in place")
    parser.add_argument("--allow-list", default="", help="Comma-separated values to never redact")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("detect", help="List findings as JSON")
    sub.add_parser("redact", help="Redact and print JSON result")
    sub.add_parser("redact-text", help="Redact and print text only")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "detect": cmd_detect,
        "redact": cmd_redact,
        "redact-text": cmd_redact_text,
    }
    try:
        cmds[args.command](args)
    except (OSError, ValueError) as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
