"""
Token builder — the single entry point from a raw string to a typed token.

Flow:
    raw string
        │
    ┌───▼──────┐
    │ Clean    │   ← only when the length matches no layout
    └───┬──────┘
        │
    ┌───▼──────┐
    │ Detector │   ← app byte, version code, length
    └───┬──────┘
        │  (version, length)
    ┌───▼──────┐
    │ Dispatch │   ← exact match against the codec table, else InvalidEncoding
    └───┬──────┘
        │
    ┌───▼──────┐
    │ Variant  │   ← full parse + checksum verification
    └───┬──────┘
        │
      Token

``build`` raises a typed ``TokenError`` for every malformed input;
``inspect_token`` wraps it into a report for callers that must not raise
(the CLI).
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from pydantic import BaseModel

from .detector import analyze
from .exceptions import (
    ChecksumError,
    InvalidEncodingError,
    LengthError,
    TokenError,
    UnknownChannelError,
    UnknownNetworkError,
    VersionError,
)
from .fields import clean_token_string
from .models import Channel, Check, Network, TokenFinding, Version
from .tokens import TOKEN_TYPES, BaseToken, Token

logger = logging.getLogger(__name__)

# Exact (version, total length) pairs that have a codec.
_CODECS: dict[tuple[Version, int], type[BaseToken]] = {
    (version, token_type.size_of()): token_type
    for version, token_type in TOKEN_TYPES.items()
}
_SIZES = {size for _, size in _CODECS}


def build(raw: str, *, strict: bool = False) -> Token:
    """Detect the version of ``raw`` and decode it with the matching variant.

    Input whose length matches a token layout is taken verbatim; anything
    else has its separators stripped first. The dispatch key is the detected
    version and that length, so a V01 code in a 24-character string is
    rejected, not guessed at.

    Raises:
        TokenError: any subclass, describing the failed check.
    """
    candidate = raw if len(raw) in _SIZES else clean_token_string(raw)
    app, version, length = analyze(candidate)

    token_type = _CODECS.get((version, length))
    if token_type is None:
        logger.warning(
            "This app/version set is not supported: app=0x%02X version=%s length=%d",
            app,
            version.code,
            length,
        )
        raise InvalidEncodingError(
            raw, f"no codec for version {version.code} with length {length}"
        )

    logger.debug("Dispatching %r to %s", raw, token_type.__name__)
    return token_type.parse(raw, strict=strict)


def new_token(
    version: Version | int,
    app: int,
    network: Network | int,
    index: int,
    case_id: int,
    channel: Channel | str,
    secret: Optional[str] = None,
    *,
    rng: Optional[random.Random] = None,
) -> Token:
    """Create a token of the given version with a random secret unless one is given."""
    token_type = TOKEN_TYPES[Version(version)]
    return token_type.new(app, network, index, case_id, Channel(channel), secret, rng=rng)


# ─── Inspection Report ──────────────────────────────────────────────


class TokenReport(BaseModel):
    """Outcome of inspecting a candidate token string."""

    input: str
    is_valid: bool
    token: Optional[Token] = None
    failure: Optional[TokenFinding] = None


def inspect_token(raw: str, *, strict: bool = False) -> TokenReport:
    """Run ``build`` and report the outcome instead of raising.

    A rejected token reports which check failed; checksum failures carry
    the expected and found checksum in ``failure.details``.
    """
    try:
        token = build(raw, strict=strict)
    except TokenError as e:
        logger.info("Rejected token %r: %s", raw, e)
        return TokenReport(
            input=raw,
            is_valid=False,
            failure=TokenFinding(
                check=_check_for(e),
                code=e.code,
                message=str(e),
                details=e.details,
            ),
        )

    return TokenReport(input=raw, is_valid=True, token=token)


def _check_for(error: TokenError) -> Check:
    if isinstance(error, LengthError):
        return Check.LENGTH
    if isinstance(error, VersionError):
        return Check.VERSION
    if isinstance(error, UnknownNetworkError):
        return Check.NETWORK
    if isinstance(error, UnknownChannelError):
        return Check.CHANNEL
    if isinstance(error, ChecksumError):
        return Check.CHECKSUM
    return Check.ENCODING
