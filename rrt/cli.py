"""
Command-line interface for decoding and generating tokens.

Usage:
    rrt decode 0000000012345TWRAJQFIZWW
    rrt decode 0001000012345TWRAJQFIZWNC --separator " "
    rrt new --token-version 1 --network 2 --index 1 --case-id 11041 --channel TW
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional

from pydantic import ValidationError

from . import __version__
from .builder import inspect_token, new_token
from .config import Settings, load_settings
from .models import Channel, TokenFinding, Version
from .tokens import BaseToken

# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 60
_INDENT = "  Token:    "


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _field_labels(token: BaseToken) -> list[str]:
    """One label per field, in token order."""
    return [
        f"app: 0x{token.app:02X}",
        f"version: {token.version.name} (0x{token.version.code})",
        f"network: {token.network.label} (0x{token.network.code:02X})",
        f"registrar #{token.index}",
        f"case id: {token.case_id} (0x{token.case_id:05X})",
        f"channel: {token.channel.label}",
        f"secret: {token.secret}",
        f"checksum: {token.checksum}",
    ]


def field_tree(token: BaseToken, separator: str) -> list[str]:
    """Draw a line from the start of each field to its label.

    Columns follow ``token.format_string(separator)``, so the tree lines up
    with whatever separator is displayed.
    """
    widths = [2, 2, 2, 2, 5, 2, 8, token.CHECKSUM.width]
    columns = []
    column = 0
    for width in widths:
        columns.append(column)
        column += width + len(separator)

    lines = []
    labels = _field_labels(token)
    for i in reversed(range(len(widths))):
        row = [" "] * (columns[i] + 1)
        for j in range(i):
            row[columns[j]] = "│"
        row[columns[i]] = "└"
        lines.append("".join(row) + f"── {labels[i]}")
    return lines


def _print_token(token: BaseToken, separator: str) -> None:
    print(f"{_INDENT}{_BOLD}{token.format_string(separator)}{_RESET}")
    pad = " " * len(_INDENT)
    for line in field_tree(token, separator):
        print(f"{pad}{_DIM}{line}{_RESET}")


def _print_failure(failure: TokenFinding) -> None:
    print(f"\n  {_RED}{_BOLD}REJECTED by {failure.check.value} check{_RESET}")
    print(f"    {_RED}[{failure.code}]{_RESET}")
    print(f"    {failure.message}")
    for k, v in failure.details.items():
        if v is not None:
            print(f"      {_DIM}{k}: {v}{_RESET}")


# ─── Commands ───────────────────────────────────────────────────────


def cmd_decode(args: argparse.Namespace, settings: Settings) -> int:
    """Decode and verify a token.

    Returns:
        0 if the token is valid, 1 if rejected.
    """
    separator = settings.separator if args.separator is None else args.separator
    strict = args.strict or settings.strict

    report = inspect_token(args.token, strict=strict)

    print(f"\n{'=' * _WIDTH}")
    print(f"  Input:    {args.token}")
    if report.token is not None:
        _print_token(report.token, separator)
    if report.failure is not None:
        _print_failure(report.failure)
    print(f"{'=' * _WIDTH}")

    if report.is_valid:
        print(f"  {_GREEN}{_BOLD}This token is VALID{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}This token is INVALID{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 0 if report.is_valid else 1


def cmd_new(args: argparse.Namespace, settings: Settings) -> int:
    """Generate a token and print it in canonical and display form."""
    try:
        token = new_token(
            args.token_version,
            args.app,
            args.network,
            args.index,
            args.case_id,
            args.channel,
            args.secret,
        )
    except ValidationError as e:
        print(f"  {_RED}{_BOLD}Cannot build token{_RESET}")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"    {field}: {error['msg']}")
        return 2

    print(f"\n  {_CYAN}{_BOLD}{token}{_RESET}")
    _print_token(token, settings.separator)
    print()
    return 0


# ─── Parser ─────────────────────────────────────────────────────────


def _int_auto(value: str) -> int:
    """Accept decimal or prefixed literals: 42, 0x2A, 0o52."""
    return int(value, 0)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="rrt",
        description="Decode, verify and generate registrar verification tokens",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Decode command
    decode_parser = subparsers.add_parser("decode", help="Decode and verify a token")
    decode_parser.add_argument("token", help="The token string")
    decode_parser.add_argument(
        "-s", "--separator",
        default=None,
        help="Separator used to display fields (default: RRT_SEPARATOR or '-')",
    )
    decode_parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject unknown network and channel codes",
    )
    decode_parser.set_defaults(func=cmd_decode)

    # New command
    new_parser = subparsers.add_parser("new", help="Generate a new token")
    new_parser.add_argument(
        "-t", "--token-version",
        type=int,
        choices=[v.value for v in Version],
        default=Version.V01.value,
        help="Token layout version (default: 1)",
    )
    new_parser.add_argument("--app", type=_int_auto, default=0, help="App byte")
    new_parser.add_argument("--network", type=_int_auto, default=0, help="Network code")
    new_parser.add_argument("--index", type=_int_auto, default=0, help="Registrar index")
    new_parser.add_argument("--case-id", type=_int_auto, required=True, help="Case id")
    new_parser.add_argument(
        "--channel",
        choices=[c.value for c in Channel if c.is_known],
        required=True,
        help="Verification channel",
    )
    new_parser.add_argument("--secret", default=None, help="8-character secret (random if omitted)")
    new_parser.set_defaults(func=cmd_new)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, configure logging and run the command."""
    settings = load_settings()
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    return args.func(args, settings)
