"""
Detector, builder dispatch and inspection report tests.

Run: pytest tests/ -v
"""

from __future__ import annotations

import logging
import random

import pytest

from rrt.builder import TokenReport, build, inspect_token, new_token
from rrt.detector import analyze
from rrt.exceptions import (
    ChecksumError,
    InvalidEncodingError,
    LengthError,
    TokenError,
    UnknownNetworkError,
    UnsupportedVersionError,
    VersionParseError,
)
from rrt.models import Channel, Check, KnownNetwork, Version
from rrt.tokens import TokenV00, TokenV01

V00_TOKEN = "0000000012345TWRAJQFIZWW"
V01_TOKEN = "0001000012345TWRAJQFIZWNC"
UNKNOWN_NETWORK_V00 = "1100420012345TWBABAEFGHE"


# ═══════════════════════════════════════════════════════════════════════
# DETECTOR
# ═══════════════════════════════════════════════════════════════════════


class TestDetector:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (V00_TOKEN, (0, Version.V00, 24)),
            ("0A01000012345TWRAJQFIZWF", (10, Version.V01, 24)),
            ("0301000012345TWRAJQFIZWFX", (3, Version.V01, 25)),
        ],
    )
    def test_classifies(self, raw, expected):
        assert analyze(raw) == expected

    def test_length_is_not_cleaned(self):
        assert analyze("0000-00-00-12345") == (0, Version.V00, 16)

    @pytest.mark.parametrize("raw", ["", "A"])
    def test_too_short(self, raw):
        with pytest.raises(LengthError) as exc_info:
            analyze(raw)
        assert exc_info.value.expected == 2
        assert exc_info.value.found == len(raw)

    def test_needs_version_code(self):
        with pytest.raises(LengthError) as exc_info:
            analyze("000")
        assert exc_info.value.found == 3

    def test_unsupported_version(self):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            analyze("FF02000012345TWRAJQFIZWFX")
        assert exc_info.value.version_code == 2

    def test_unparseable_version(self):
        with pytest.raises(VersionParseError) as exc_info:
            analyze("00XX000012345TWRAJQFIZWW")
        assert exc_info.value.raw == "XX"

    def test_app_must_be_hex(self):
        with pytest.raises(InvalidEncodingError):
            analyze("ZZ00000012345TWRAJQFIZWW")

    def test_any_app_byte_accepted(self):
        assert analyze("FF00")[0] == 255


# ═══════════════════════════════════════════════════════════════════════
# BUILDER
# ═══════════════════════════════════════════════════════════════════════


class TestBuild:
    def test_builds_v00(self):
        token = build(V00_TOKEN)
        assert isinstance(token, TokenV00)
        assert token.case_id == 0x12345
        assert token.checksum == "W"

    def test_builds_v01(self):
        token = build(V01_TOKEN)
        assert isinstance(token, TokenV01)
        assert token.checksum == "NC"

    def test_version_length_mismatch_is_invalid_encoding(self):
        """A V01 code in a 24-character string has no codec."""
        with pytest.raises(InvalidEncodingError) as exc_info:
            build("0A01000012345TWRAJQFIZWF")
        assert exc_info.value.raw == "0A01000012345TWRAJQFIZWF"

    @pytest.mark.parametrize(
        "separated, compact",
        [
            ("00-00-00-00-12345-TW-RAJQFIZW-W", V00_TOKEN),
            ("00-01-00-00-12345-TW-RAJQFIZW-NC", V01_TOKEN),
            ("11-00-42-00_12345 TW/BABAEFGH:E", UNKNOWN_NETWORK_V00),
        ],
    )
    def test_separated_input_is_cleaned(self, separated, compact):
        assert build(separated) == build(compact)

    def test_cleaned_input_still_dispatches_on_length(self):
        """A V01 code that cleans to 24 characters has no codec."""
        with pytest.raises(InvalidEncodingError):
            build("0A-01-00-00-12345-TW-RAJQFIZW-F")

    def test_layout_length_input_is_taken_verbatim(self):
        with pytest.raises(InvalidEncodingError):
            build("0000-00012345TWRAJQFIZWW")

    def test_separated_checksum_mismatch(self):
        with pytest.raises(ChecksumError) as exc_info:
            build("11-00-42-00_12345 TW/BABAEFGH:H")
        assert (exc_info.value.expected, exc_info.value.found) == ("E", "H")

    def test_separators_only(self):
        with pytest.raises(LengthError):
            build("--:--")

    def test_detector_errors_propagate(self):
        with pytest.raises(UnsupportedVersionError):
            build("FF02000012345TWRAJQFIZWFX")
        with pytest.raises(LengthError):
            build("A")

    def test_checksum_mismatch(self):
        with pytest.raises(ChecksumError) as exc_info:
            build("0000000012345TWRAJQFIZWX")
        assert (exc_info.value.expected, exc_info.value.found) == ("W", "X")

    def test_v01_checksum_mismatch(self):
        with pytest.raises(ChecksumError) as exc_info:
            build("0001000012345TWRAJQFIZWNA")
        assert (exc_info.value.expected, exc_info.value.found) == ("NC", "NA")

    def test_strict_mode(self):
        assert build(UNKNOWN_NETWORK_V00).network.code == 0x42
        with pytest.raises(UnknownNetworkError):
            build(UNKNOWN_NETWORK_V00, strict=True)

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "0",
            "0000",
            "ÿÿÿÿ",
            "0000000000000000000000?",
            V00_TOKEN.lower(),
            "0001" + "é" * 21,
            "0100????????????????????",
            " " * 24,
        ],
    )
    def test_malformed_input_raises_typed_errors_only(self, raw):
        with pytest.raises(TokenError):
            build(raw)

    def test_logs_unsupported_combination(self, caplog):
        with caplog.at_level(logging.WARNING, logger="rrt.builder"):
            with pytest.raises(InvalidEncodingError):
                build("0A01000012345TWRAJQFIZWF")
        assert "not supported" in caplog.text


class TestNewToken:
    def test_picks_variant_by_version(self):
        assert isinstance(new_token(Version.V00, 0, 0, 0, 1, Channel.EMAIL), TokenV00)
        assert isinstance(new_token(1, 0, 0, 0, 1, "EM"), TokenV01)

    def test_round_trip_through_builder(self):
        for version in Version:
            token = new_token(
                version, 0x11, KnownNetwork.WESTEND, 3, 11041, Channel.MATRIX,
                rng=random.Random(9),
            )
            assert build(str(token)) == token

    def test_explicit_secret(self):
        token = new_token(Version.V01, 0, 2, 1, 11041, Channel.TWITTER, "ABCDEFGH")
        assert token.secret == "ABCDEFGH"

    def test_unknown_version_number(self):
        with pytest.raises(ValueError):
            new_token(2, 0, 0, 0, 1, Channel.EMAIL)


# ═══════════════════════════════════════════════════════════════════════
# INSPECTION REPORT
# ═══════════════════════════════════════════════════════════════════════


class TestInspectToken:
    def test_valid_token(self):
        report = inspect_token(V01_TOKEN)
        assert report.is_valid
        assert isinstance(report.token, TokenV01)
        assert report.failure is None

    @pytest.mark.parametrize(
        "raw, check, code",
        [
            ("A", Check.LENGTH, "LENGTH_ERROR"),
            ("FF02000012345TWRAJQFIZWFX", Check.VERSION, "UNSUPPORTED_VERSION"),
            ("00XX000012345TWRAJQFIZWW", Check.VERSION, "VERSION_PARSE_ERROR"),
            ("0A01000012345TWRAJQFIZWF", Check.ENCODING, "INVALID_ENCODING"),
            ("0000-00012345TWRAJQFIZWW", Check.ENCODING, "INVALID_ENCODING"),
            ("00-00-00-00-12345-TW-RAJQFIZW-X", Check.CHECKSUM, "CHECKSUM_MISMATCH"),
            ("0000000012345TWRAJQFIZWX", Check.CHECKSUM, "CHECKSUM_MISMATCH"),
        ],
    )
    def test_reports_failed_check(self, raw, check, code):
        report = inspect_token(raw)
        assert not report.is_valid
        assert report.token is None
        assert report.failure is not None
        assert report.failure.check is check
        assert report.failure.code == code

    def test_separated_token_is_valid(self):
        report = inspect_token("00-01-00-00-12345-TW-RAJQFIZW-NC")
        assert report.is_valid
        assert report.input == "00-01-00-00-12345-TW-RAJQFIZW-NC"
        assert str(report.token) == V01_TOKEN

    def test_checksum_failure_details(self):
        report = inspect_token("0000000012345TWRAJQFIZWX")
        assert report.failure is not None
        assert report.failure.details["expected"] == "W"
        assert report.failure.details["found"] == "X"

    def test_strict_network_failure(self):
        report = inspect_token(UNKNOWN_NETWORK_V00, strict=True)
        assert report.failure is not None
        assert report.failure.check is Check.NETWORK

    def test_report_serializes(self):
        data = inspect_token(V00_TOKEN).model_dump(mode="json")
        assert data["is_valid"] is True
        assert data["token"]["secret"] == "RAJQFIZW"
        assert data["token"]["version"] == 0

    def test_report_model(self):
        assert isinstance(inspect_token(V00_TOKEN), TokenReport)


# ═══════════════════════════════════════════════════════════════════════
# ERROR CONTRACT
# ═══════════════════════════════════════════════════════════════════════


class TestTokenError:
    def test_carries_code_message_and_details(self):
        error = LengthError(expected=24, found=18)
        assert error.code == "LENGTH_ERROR"
        assert str(error) == "Invalid length: expected 24 characters, found 18"
        assert error.details == {"expected": 24, "found": 18}

    def test_details_default_to_empty(self):
        assert TokenError("X", "message").details == {}

    def test_details_are_copied(self):
        details = {"raw": "00"}
        error = TokenError("X", "message", details)
        details["raw"] = "changed"
        assert error.details == {"raw": "00"}
