"""
Typed errors raised while decoding a token string.

One class per check a candidate string can fail: length, version, field
encoding, strict network/channel lookup and checksum. ``inspect_token``
maps each class to the check it reports.
"""

from __future__ import annotations

from typing import Any


class TokenError(Exception):
    """A candidate token string was rejected.

    ``code`` is a stable machine-readable name such as ``CHECKSUM_MISMATCH``;
    ``details`` carries the offending values for reports.
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = dict(details) if details else {}


class LengthError(TokenError):
    """The input is shorter (or longer) than the layout requires."""

    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            "LENGTH_ERROR",
            f"Invalid length: expected {expected} characters, found {found}",
            {"expected": expected, "found": found},
        )


class VersionError(TokenError):
    """Base class for version field failures."""


class VersionParseError(VersionError):
    """The version field is not a recognizable 2-character code."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(
            "VERSION_PARSE_ERROR",
            f"Cannot parse a version from '{raw}'",
            {"raw": raw},
        )


class UnsupportedVersionError(VersionError):
    """The version field is numeric but no codec implements it."""

    def __init__(self, version_code: int):
        self.version_code = version_code
        super().__init__(
            "UNSUPPORTED_VERSION",
            f"Version {version_code:02} is not supported",
            {"version_code": version_code},
        )


class UnknownNetworkError(TokenError):
    """The network code is not a known network (strict mode only)."""

    def __init__(self, network_code: int):
        self.network_code = network_code
        super().__init__(
            "UNKNOWN_NETWORK",
            f"Unknown network code 0x{network_code:02X}",
            {"network_code": network_code},
        )


class UnknownChannelError(TokenError):
    """The channel code is not a known channel (strict mode only)."""

    def __init__(self, channel_code: str):
        self.channel_code = channel_code
        super().__init__(
            "UNKNOWN_CHANNEL",
            f"Unknown channel code '{channel_code}'",
            {"channel_code": channel_code},
        )


class InvalidEncodingError(TokenError):
    """No codec matches the input, or a field is not validly encoded."""

    def __init__(self, raw: str, reason: str | None = None):
        self.raw = raw
        message = f"Invalid encoding: '{raw}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__("INVALID_ENCODING", message, {"raw": raw, "reason": reason})


class ChecksumError(TokenError):
    """The recomputed checksum disagrees with the trailing checksum characters."""

    def __init__(self, string: str, expected: str, found: str):
        self.string = string
        self.expected = expected
        self.found = found
        super().__init__(
            "CHECKSUM_MISMATCH",
            (
                f"Wrong checksum for {string}. "
                f"Got {_ascii_codes(found)}={found}, "
                f"expected {_ascii_codes(expected)}={expected}"
            ),
            {"string": string, "expected": expected, "found": found},
        )


def _ascii_codes(chars: str) -> list[int] | int:
    codes = [ord(c) for c in chars]
    return codes[0] if len(codes) == 1 else codes
