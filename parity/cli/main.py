"""
Parity CLI — Compare two JSON documents.

Commands:
    parity equivalent <expected> <actual> [--strict]
        Structural equivalence: arrays compare as multisets, objects
        member by member. Without --strict, extra array items and
        extra object keys on the actual side are ignored.

    parity equal <expected> <actual>
        Equality through the capability dispatcher (element-wise for
        arrays and objects).

Exit codes:
    0: equivalent / equal
    1: not equivalent / not equal
    2: a document could not be read or parsed
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from ..equality import EqualityComparer
from ..equivalence import verify_equivalence


# =============================================================================
# INPUT
# =============================================================================

class DocumentError(Exception):
    """Raised when a JSON document cannot be loaded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def load_document(path: str) -> Any:
    """Read and parse a JSON document."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(path, e.strerror or str(e)) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(path, f"invalid JSON ({e.msg} at line {e.lineno})") from e


def load_pair(args: argparse.Namespace) -> tuple[Any, Any]:
    return load_document(args.expected), load_document(args.actual)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_equivalent(args: argparse.Namespace) -> int:
    """Check structural equivalence of two documents."""
    try:
        expected, actual = load_pair(args)
    except DocumentError as e:
        print("ERROR: Cannot load document")
        print(f"Reason: {e}")
        return 2

    mode = "strict" if args.strict else "loose"
    failure = verify_equivalence(expected, actual, strict=args.strict)

    if failure is None:
        print(f"EQUIVALENT ({mode})")
        return 0

    print(f"NOT EQUIVALENT ({mode})")
    print("=" * 50)
    print(failure.message())
    return 1


def cmd_equal(args: argparse.Namespace) -> int:
    """Check equality of two documents."""
    try:
        expected, actual = load_pair(args)
    except DocumentError as e:
        print("ERROR: Cannot load document")
        print(f"Reason: {e}")
        return 2

    if EqualityComparer().equals(expected, actual):
        print("EQUAL")
        return 0

    print("NOT EQUAL")
    return 1


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="parity",
        description="Parity: equality and structural equivalence of JSON documents",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log comparison details to stderr",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Equivalent command
    equivalent_parser = subparsers.add_parser(
        "equivalent",
        help="Check structural equivalence",
    )
    equivalent_parser.add_argument("expected", help="Path to the expected JSON document")
    equivalent_parser.add_argument("actual", help="Path to the actual JSON document")
    equivalent_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on extra array items or object keys in the actual document",
    )
    equivalent_parser.set_defaults(func=cmd_equivalent)

    # Equal command
    equal_parser = subparsers.add_parser(
        "equal",
        help="Check equality",
    )
    equal_parser.add_argument("expected", help="Path to the expected JSON document")
    equal_parser.add_argument("actual", help="Path to the actual JSON document")
    equal_parser.set_defaults(func=cmd_equal)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[parity] [%(levelname)s] %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
