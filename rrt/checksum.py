"""
Checksum algorithms appended to tokens.

Both algorithms map a byte sequence to one or two ASCII capitals (65..90),
so a checksum is always typeable. They catch transcription errors; they are
NOT a defence against tampering.

Every method is static: nothing is carried from one call to the next, so
the same input always yields the same checksum regardless of which instance
(if any) computes it, or from which thread.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, ClassVar

_ALPHABET_SIZE = 26
_FIRST_LETTER = ord("A")


def _to_letter(value: int) -> int:
    """Fold any integer into the ASCII range 'A'..'Z'."""
    return value % _ALPHABET_SIZE + _FIRST_LETTER


class ChecksumAlgorithm(ABC):
    """Common interface: subclasses implement ``calculate``; ``verify`` recomputes."""

    width: ClassVar[int]

    @staticmethod
    @abstractmethod
    def calculate(data: bytes) -> Any:
        """The checksum of ``data`` as ASCII codes."""

    @classmethod
    def verify(cls, data: bytes, checksum: Any) -> bool:
        """True when ``checksum`` is the checksum of ``data``."""
        return cls.calculate(data) == cls._coerce(checksum)

    @classmethod
    def text(cls, data: bytes) -> str:
        """The checksum of ``data`` as the characters appended to a token."""
        result = cls.calculate(data)
        codes = result if isinstance(result, list) else [result]
        return "".join(chr(c) for c in codes)

    @staticmethod
    def _coerce(checksum: Any) -> Any:
        return checksum


class ChecksumV00(ChecksumAlgorithm):
    """Byte sum with 8-bit wraparound, folded into one capital letter.

    Known limitation of the legacy format: the sum ignores position, so
    swapping two characters ("AB" / "BA") yields the same checksum.
    """

    width = 1

    @staticmethod
    def calculate(data: bytes) -> int:
        return _to_letter(sum(data) & 0xFF)

    @staticmethod
    def _coerce(checksum: Any) -> Any:
        # A single character, as text or as one byte.
        if isinstance(checksum, str) and len(checksum) == 1:
            return ord(checksum)
        if isinstance(checksum, (bytes, bytearray)) and len(checksum) == 1:
            return checksum[0]
        return checksum


class ChecksumV01(ChecksumAlgorithm):
    """Fletcher-16 folded into two capital letters.

    The second running sum accumulates the first one after every byte, so
    each byte's contribution depends on its position. That makes the result
    sensitive to swapped characters, unlike ``ChecksumV00``.

    The high byte (second sum) and low byte (first sum) are each folded
    into a letter independently: ``[high % 26 + 65, low % 26 + 65]``.
    """

    width = 2

    @staticmethod
    def calculate(data: bytes) -> list[int]:
        sum1 = 0
        sum2 = 0
        for byte in data:
            sum1 = (sum1 + byte) % 255
            sum2 = (sum2 + sum1) % 255
        value = (sum2 << 8) | sum1
        return [_to_letter(value >> 8), _to_letter(value & 0xFF)]

    @staticmethod
    def _coerce(checksum: Any) -> Any:
        if isinstance(checksum, str):
            return [ord(c) for c in checksum]
        if isinstance(checksum, Sequence):
            return list(checksum)
        return checksum
