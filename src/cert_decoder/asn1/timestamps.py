"""
ASN.1 time decoding — UTCTime (tag 0x17) and GeneralizedTime (tag 0x18).

Both produce timezone-aware UTC datetimes. UTCTime carries a two-digit year
that pivots at 50: 00-49 are 20xx, 50-99 are 19xx.

Accepted content:
  UTCTime          YYMMDDHHMM[SS](Z|+hhmm|-hhmm)
  GeneralizedTime  YYYYMMDDHHMM[SS[.fff]](Z|+hhmm|-hhmm)
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

from cert_decoder.asn1.cursor import TAG_GENERALIZED_TIME, TAG_UTC_TIME
from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind

UTC_TIME_PIVOT = 50

_UTC_TIME = re.compile(
    r"^(?P<year>\d{2})(?P<month>\d{2})(?P<day>\d{2})(?P<hour>\d{2})(?P<minute>\d{2})"
    r"(?P<second>\d{2})?(?P<zone>Z|[+-]\d{4})$"
)
_GENERALIZED_TIME = re.compile(
    r"^(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})(?P<hour>\d{2})(?P<minute>\d{2})"
    r"(?:(?P<second>\d{2})(?:[.,](?P<fraction>\d+))?)?(?P<zone>Z|[+-]\d{4})$"
)


def expand_utc_year(two_digit_year: int) -> int:
    if two_digit_year < UTC_TIME_PIVOT:
        return 2000 + two_digit_year
    return 1900 + two_digit_year


def _zone_offset(zone: str) -> timedelta:
    if zone == "Z":
        return timedelta(0)
    sign = -1 if zone[0] == "-" else 1
    return sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[3:5]))


def parse_time(tag: int, body: bytes, offset: int | None = None) -> datetime:
    """
    Decode the content octets of a time element into a UTC datetime.

    Raises UNEXPECTED_TAG for anything but UTCTime/GeneralizedTime and
    INVALID_TIME when the text does not match the expected layout.
    """
    if tag == TAG_UTC_TIME:
        pattern = _UTC_TIME
    elif tag == TAG_GENERALIZED_TIME:
        pattern = _GENERALIZED_TIME
    else:
        raise CertificateDecodeError(
            ErrorKind.UNEXPECTED_TAG,
            f"Expected UTCTime or GeneralizedTime, found tag 0x{tag:02X}",
            offset,
        )

    text = body.decode("ascii", errors="replace")
    match = pattern.match(text)
    if match is None:
        raise CertificateDecodeError(ErrorKind.INVALID_TIME, f"Malformed time value {text!r}", offset)

    year = int(match["year"])
    if tag == TAG_UTC_TIME:
        year = expand_utc_year(year)
    fraction = match.groupdict().get("fraction") or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0

    try:
        local = datetime(
            year,
            int(match["month"]),
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"] or 0),
            microsecond,
            tzinfo=UTC,
        )
        return local - _zone_offset(match["zone"])
    except (ValueError, OverflowError) as e:
        raise CertificateDecodeError(ErrorKind.INVALID_TIME, f"Invalid time value {text!r}: {e}", offset) from e
