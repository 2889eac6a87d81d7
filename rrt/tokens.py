"""
Token variants — one immutable model per supported layout.

Layout (offsets into the cleaned string):

    app  ver  net  idx  case_id  ch  secret    checksum
    0:2  2:4  4:6  6:8  8:13     13:15 15:23   23:24 (V00) / 23:25 (V01)

    01-00-02-01-02B21-TW-RAJQFIZW-O    (dashes for readability only)

The checksum is never stored. It is recomputed from the canonical encoding
of the other fields whenever it is read, so a token value can never carry a
stale or mismatching checksum. Parsing recomputes it and compares against
the trailing characters of the input; a mismatch is a hard error.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Annotated, ClassVar, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .checksum import ChecksumAlgorithm, ChecksumV00, ChecksumV01
from .exceptions import (
    ChecksumError,
    InvalidEncodingError,
    LengthError,
    UnknownChannelError,
    UnknownNetworkError,
)
from .fields import clean_token_string, decode_hex, encode_hex, generate_secret
from .models import TOKEN_BODY_LENGTH, Channel, Network, Secret, Version

logger = logging.getLogger(__name__)

MAX_CASE_ID = 0xFFFFF  # 5 hex digits

_SECRET = re.compile(r"[A-Z0-9]{8}")

_T = TypeVar("_T", bound="BaseToken")


class BaseToken(BaseModel):
    """Fields, rendering and parsing shared by every token version.

    Subclasses pin ``VERSION`` and ``CHECKSUM``; everything else is common.
    """

    model_config = ConfigDict(frozen=True)

    VERSION: ClassVar[Version]
    CHECKSUM: ClassVar[type[ChecksumAlgorithm]]

    app: int = Field(ge=0, le=0xFF)
    version: Version
    network: Network
    index: int = Field(ge=0, le=0xFF)  # Registrar index
    case_id: int = Field(ge=0, le=MAX_CASE_ID)
    channel: Channel
    secret: Secret

    @field_validator("network", mode="before")
    @classmethod
    def _network_from_code(cls, value: object) -> object:
        # Accept a bare code or a KnownNetwork member in place of a Network.
        if isinstance(value, int) and not isinstance(value, bool):
            return Network.from_code(value)
        return value

    # ─── Construction ───────────────────────────────────────────────

    @classmethod
    def new(
        cls: type[_T],
        app: int,
        network: Network | int,
        index: int,
        case_id: int,
        channel: Channel,
        secret: Optional[str] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> _T:
        """Create a token, drawing a random secret unless one is given.

        Raises:
            pydantic.ValidationError: if a field violates its documented range
                (e.g. a secret that is not 8 characters). This is a caller bug,
                not a malformed user input.
        """
        if secret is None:
            secret = generate_secret(rng=rng)
        return cls(
            app=app,
            network=network,
            index=index,
            case_id=case_id,
            channel=channel,
            secret=secret,
        )

    # ─── Rendering ──────────────────────────────────────────────────

    def _fields(self) -> list[str]:
        return [
            encode_hex(self.app, 2),
            self.version.code,
            encode_hex(self.network.code, 2),
            encode_hex(self.index, 2),
            encode_hex(self.case_id, 5),
            self.channel.value,
            self.secret,
        ]

    @property
    def checksum(self) -> str:
        """Checksum characters, recomputed from the canonical field encoding."""
        body = "".join(self._fields())
        return self.CHECKSUM.text(body.encode("ascii"))

    def format_string(self, separator: str = "") -> str:
        """Render the token with ``separator`` between fields.

        The empty separator gives the canonical machine form; anything else
        is for display only (the CLI uses "-").
        """
        return separator.join([*self._fields(), self.checksum])

    @classmethod
    def size_of(cls) -> int:
        """Length of the canonical form of tokens of this version."""
        return cls.VERSION.length

    def __str__(self) -> str:
        return self.format_string()

    # ─── Parsing ────────────────────────────────────────────────────

    @classmethod
    def parse(cls: type[_T], raw: str, *, strict: bool = False) -> _T:
        """Parse and verify a token string of this version.

        Separators are stripped first, unless the input already has the exact
        token length, in which case it is used verbatim.

        Args:
            raw: The candidate token string.
            strict: Reject unknown network and channel codes instead of
                keeping them.

        Raises:
            LengthError: the cleaned input is not exactly ``size_of()`` long.
            VersionError: the version field is unparseable or unsupported.
            InvalidEncodingError: a field is malformed, or the version field
                belongs to another layout.
            UnknownNetworkError / UnknownChannelError: strict mode only.
            ChecksumError: the trailing checksum does not match.
        """
        length = cls.size_of()
        cleaned = raw if len(raw) == length else clean_token_string(raw)
        if len(cleaned) != length:
            raise LengthError(expected=length, found=len(cleaned))

        body = cleaned[:TOKEN_BODY_LENGTH]
        found = cleaned[-cls.CHECKSUM.width:]

        app = decode_hex(body[0:2], "app")
        version = Version.from_code(body[2:4])
        if version is not cls.VERSION:
            raise InvalidEncodingError(
                raw, f"version {version.code} cannot be decoded as {cls.VERSION.name}"
            )
        network = Network.from_code(decode_hex(body[4:6], "network"))
        index = decode_hex(body[6:8], "index")
        case_id = decode_hex(body[8:13], "case_id")
        channel_code = body[13:15]
        channel = Channel.from_code(channel_code)
        secret = body[15:23]
        if not _SECRET.fullmatch(secret):
            raise InvalidEncodingError(raw, "secret must be 8 characters from A-Z0-9")

        if strict and not network.is_known:
            raise UnknownNetworkError(network.code)
        if strict and not channel.is_known:
            raise UnknownChannelError(channel_code)

        token = cls(
            app=app,
            network=network,
            index=index,
            case_id=case_id,
            channel=channel,
            secret=secret,
        )

        expected = token.checksum
        if found != expected:
            raise ChecksumError(cleaned, expected=expected, found=found)

        logger.debug("Decoded %s token %s", cls.VERSION.name, cleaned)
        return token


class TokenV00(BaseToken):
    """Legacy 24-character layout with a 1-character byte-sum checksum."""

    VERSION: ClassVar[Version] = Version.V00
    CHECKSUM: ClassVar[type[ChecksumAlgorithm]] = ChecksumV00

    version: Literal[Version.V00] = Version.V00


class TokenV01(BaseToken):
    """25-character layout with a 2-character Fletcher-16 checksum."""

    VERSION: ClassVar[Version] = Version.V01
    CHECKSUM: ClassVar[type[ChecksumAlgorithm]] = ChecksumV01

    version: Literal[Version.V01] = Version.V01


# Any token, discriminated by its version field.
Token = Annotated[Union[TokenV00, TokenV01], Field(discriminator="version")]

TOKEN_TYPES: dict[Version, type[BaseToken]] = {
    Version.V00: TokenV00,
    Version.V01: TokenV01,
}
