"""
Version detection — sniff just enough of a candidate string to route it.

The detector reads the app byte and the version code and reports the input
length untouched (separators included), leaving the full parse to the
matching token variant.
"""

from __future__ import annotations

from .exceptions import LengthError
from .fields import decode_hex
from .models import Version

# Both the app byte and the version code must be present.
_MIN_LENGTH = 4


def analyze(raw: str) -> tuple[int, Version, int]:
    """Classify a candidate token string.

    Args:
        raw: The candidate string, as typed.

    Returns:
        (app, version, length) where ``length`` is ``len(raw)``.

    Raises:
        LengthError: too short to hold an app byte and a version code.
        InvalidEncodingError: the app byte is not hex.
        VersionParseError / UnsupportedVersionError: see ``Version.from_code``.
    """
    if len(raw) < 2:
        raise LengthError(expected=2, found=len(raw))
    if len(raw) < _MIN_LENGTH:
        raise LengthError(expected=_MIN_LENGTH, found=len(raw))

    app = decode_hex(raw[0:2], "app")
    version = Version.from_code(raw[2:4])
    return app, version, len(raw)
