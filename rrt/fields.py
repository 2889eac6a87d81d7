"""
Field codecs shared by every token layout.

Numeric fields are upper-case hex, zero-padded to a fixed width. Decoding is
strict: a field is either exactly hex or it is rejected with a typed error,
never coerced. Python's ``int(x, 16)`` is too forgiving for that (it accepts
signs, whitespace and underscores), so every field goes through a regex first.
"""

from __future__ import annotations

import random
import re
import string

from .exceptions import InvalidEncodingError

SECRET_LENGTH = 8
SECRET_ALPHABET = string.ascii_uppercase

_HEX = re.compile(r"[0-9A-F]+")
_NOT_TOKEN_CHAR = re.compile(r"[^A-Z0-9]")


def encode_hex(value: int, width: int) -> str:
    """Render ``value`` as upper-case hex, zero-padded to ``width`` digits.

    Examples:
        encode_hex(10, 2)    → "0A"
        encode_hex(11041, 5) → "02B21"
    """
    encoded = f"{value:0{width}X}"
    if value < 0 or len(encoded) > width:
        raise ValueError(f"{value} does not fit in {width} hex digits")
    return encoded


def decode_hex(raw: str, field: str = "field") -> int:
    """Decode an upper-case hex field.

    Raises:
        InvalidEncodingError: if ``raw`` contains anything but 0-9 / A-F.
    """
    if not _HEX.fullmatch(raw):
        raise InvalidEncodingError(raw, f"{field} is not upper-case hex")
    return int(raw, 16)


def clean_token_string(raw: str) -> str:
    """Remove every character that is not part of [A-Z0-9].

    Lets users type tokens with dashes, spaces, slashes or colons as
    visual separators: "0001-00_12345 TW/BABAEFGH:J" → "00010012345TWBABAEFGHJ"
    """
    return _NOT_TOKEN_CHAR.sub("", raw)


def generate_secret(length: int = SECRET_LENGTH, rng: random.Random | None = None) -> str:
    """Draw ``length`` independent uniform letters from A-Z.

    Not cryptographically secure: the secret only has to be hard to guess by
    accident. Pass a seeded ``random.Random`` for reproducible output.
    """
    source = rng if rng is not None else random
    return "".join(source.choice(SECRET_ALPHABET) for _ in range(length))
