"""
Unit tests for UTCTime / GeneralizedTime decoding.

Covers tag dispatch, the two-digit-year pivot at 50, optional seconds,
fractional seconds, zone offsets and malformed input.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from cert_decoder.asn1.timestamps import expand_utc_year, parse_time
from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind

UTC_TIME = 0x17
GENERALIZED_TIME = 0x18


class TestUtcTime:
    def test_dispatch_on_tag_0x17(self) -> None:
        """
        GIVEN tag 0x17 with body "250101120000Z"
        WHEN parsed
        THEN the instant is 2025-01-01T12:00:00Z.
        """
        assert parse_time(UTC_TIME, b"250101120000Z") == datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

    def test_year_49_is_2049(self) -> None:
        assert parse_time(UTC_TIME, b"490101000000Z").year == 2049

    def test_year_50_is_1950(self) -> None:
        assert parse_time(UTC_TIME, b"500101000000Z").year == 1950

    @pytest.mark.parametrize(("two_digit", "full"), [(0, 2000), (49, 2049), (50, 1950), (99, 1999)])
    def test_pivot(self, two_digit: int, full: int) -> None:
        assert expand_utc_year(two_digit) == full

    def test_seconds_are_optional(self) -> None:
        assert parse_time(UTC_TIME, b"0611100000Z") == datetime(2006, 11, 10, tzinfo=UTC)

    def test_zone_offset_is_normalised_to_utc(self) -> None:
        """
        GIVEN a UTCTime with a +0200 offset
        WHEN parsed
        THEN the result is the same instant expressed in UTC.
        """
        assert parse_time(UTC_TIME, b"250101120000+0200") == datetime(2025, 1, 1, 10, 0, tzinfo=UTC)


class TestGeneralizedTime:
    def test_four_digit_year(self) -> None:
        assert parse_time(GENERALIZED_TIME, b"20500101000000Z") == datetime(2050, 1, 1, tzinfo=UTC)

    def test_four_digit_year_is_not_pivoted(self) -> None:
        assert parse_time(GENERALIZED_TIME, b"19490101000000Z").year == 1949

    def test_fractional_seconds(self) -> None:
        parsed = parse_time(GENERALIZED_TIME, b"20240229235959.25Z")
        assert parsed == datetime(2024, 2, 29, 23, 59, 59, 250000, tzinfo=UTC)


class TestMalformedTime:
    def test_unknown_tag(self) -> None:
        with pytest.raises(CertificateDecodeError) as exc_info:
            parse_time(0x13, b"250101120000Z", offset=147)
        assert exc_info.value.kind is ErrorKind.UNEXPECTED_TAG
        assert exc_info.value.offset == 147

    def test_garbage_text(self) -> None:
        with pytest.raises(CertificateDecodeError) as exc_info:
            parse_time(UTC_TIME, b"not-a-time")
        assert exc_info.value.kind is ErrorKind.INVALID_TIME

    def test_impossible_date(self) -> None:
        """Month 13 matches the layout but is rejected as INVALID_TIME."""
        with pytest.raises(CertificateDecodeError) as exc_info:
            parse_time(UTC_TIME, b"251301120000Z")
        assert exc_info.value.kind is ErrorKind.INVALID_TIME

    def test_generalized_time_without_minutes(self) -> None:
        with pytest.raises(CertificateDecodeError) as exc_info:
            parse_time(GENERALIZED_TIME, b"2025010112Z")
        assert exc_info.value.kind is ErrorKind.INVALID_TIME

    @pytest.mark.parametrize("body", [b"00010101000000+0100", b"99991231235959-0100"])
    def test_zone_shift_outside_datetime_range(self, body: bytes) -> None:
        """
        GIVEN a GeneralizedTime at the edge of the representable years
        WHEN its zone offset pushes the UTC instant past that range
        THEN INVALID_TIME is raised instead of an OverflowError.
        """
        with pytest.raises(CertificateDecodeError) as exc_info:
            parse_time(GENERALIZED_TIME, body, offset=12)
        assert exc_info.value.kind is ErrorKind.INVALID_TIME
        assert exc_info.value.offset == 12
