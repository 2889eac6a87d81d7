"""
Typed building blocks of a token: version, network, channel and secret.

Unknown network and channel codes are preserved as data rather than
rejected here. Rejecting them is a policy decision left to the token
layer (see ``strict`` parsing).
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from .exceptions import UnsupportedVersionError, VersionParseError

# app(2) + version(2) + network(2) + index(2) + case_id(5) + channel(2) + secret(8)
TOKEN_BODY_LENGTH = 23

_DECIMAL_CODE = re.compile(r"[0-9]{2}")
_HEX_CODE = re.compile(r"[0-9A-F]{2}")


# ─── Version ────────────────────────────────────────────────────────


class Version(int, Enum):
    """Supported token layouts."""

    V00 = 0x00  # Byte-sum checksum, blind to swapped characters
    V01 = 0x01  # Fletcher-16 checksum, position sensitive

    @property
    def code(self) -> str:
        """The 2-digit code as it appears in a token string."""
        return f"{self.value:02X}"

    @property
    def checksum_width(self) -> int:
        return _CHECKSUM_WIDTHS[self]

    @property
    def length(self) -> int:
        """Total token length, checksum included."""
        return TOKEN_BODY_LENGTH + self.checksum_width

    @classmethod
    def from_code(cls, code: str) -> Version:
        """Look up the version for a 2-character code.

        Raises:
            UnsupportedVersionError: the code is a numeral but not implemented.
            VersionParseError: the code is not a numeral at all.
        """
        for version in cls:
            if version.code == code:
                return version
        if _DECIMAL_CODE.fullmatch(code):
            raise UnsupportedVersionError(int(code))
        if _HEX_CODE.fullmatch(code):
            raise UnsupportedVersionError(int(code, 16))
        raise VersionParseError(code)

    def __str__(self) -> str:
        return self.code


_CHECKSUM_WIDTHS: dict[Version, int] = {
    Version.V00: 1,
    Version.V01: 2,
}


# ─── Network ────────────────────────────────────────────────────────


class KnownNetwork(int, Enum):
    """Networks with a well-known code."""

    POLKADOT = 0
    KUSAMA = 2
    WESTEND = 42


class Network(BaseModel):
    """A network byte: either one of ``KnownNetwork`` or an arbitrary code.

    Any code outside the known set is kept as-is, never rejected.
    """

    model_config = ConfigDict(frozen=True)

    code: int = Field(ge=0, le=0xFF)

    @classmethod
    def from_code(cls, code: int) -> Network:
        return cls(code=int(code))

    @property
    def known(self) -> Optional[KnownNetwork]:
        """The matching ``KnownNetwork``, or None for an unknown code."""
        try:
            return KnownNetwork(self.code)
        except ValueError:
            return None

    @property
    def is_known(self) -> bool:
        return self.known is not None

    @property
    def label(self) -> str:
        known = self.known
        if known is None:
            return f"Network {self.code:02}"
        return known.name.title()

    def __str__(self) -> str:
        return self.label


# ─── Channel ────────────────────────────────────────────────────────


class Channel(str, Enum):
    """Verification channels.

    ``UNKNOWN`` is rendered as the ``XX`` sentinel so that a token holding
    an unknown channel keeps its fixed width.
    """

    UNKNOWN = "XX"
    EMAIL = "EM"
    MATRIX = "MX"
    TWITTER = "TW"

    @classmethod
    def from_code(cls, code: str) -> Channel:
        """Map a 2-letter code to a channel; unrecognized codes become UNKNOWN."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_known(self) -> bool:
        return self is not Channel.UNKNOWN

    @property
    def label(self) -> str:
        return self.value if self.is_known else "n/a"

    def __str__(self) -> str:
        return self.value


# ─── Secret ─────────────────────────────────────────────────────────

# Generated secrets only use A-Z; parsed secrets may also carry digits.
Secret = Annotated[str, StringConstraints(pattern=r"^[A-Z0-9]{8}$")]


# ─── Inspection Findings ────────────────────────────────────────────


class Check(str, Enum):
    """Which check rejected a candidate token."""

    LENGTH = "length"
    VERSION = "version"
    ENCODING = "encoding"
    NETWORK = "network"
    CHANNEL = "channel"
    CHECKSUM = "checksum"


class TokenFinding(BaseModel):
    """Why a candidate token was rejected, with machine-readable code and details."""

    check: Check
    code: str  # Machine-readable, e.g. "CHECKSUM_MISMATCH"
    message: str  # Human-readable explanation
    details: dict = Field(default_factory=dict)
