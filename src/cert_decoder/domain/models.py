"""
Domain models — immutable values produced by a certificate decode.

These are pure value objects with no parsing behavior. The grammar walker
builds them once per decode; renderers and the HTTP layer only read them.

Every model is a frozen, slotted dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any


@dataclass(frozen=True, slots=True)
class Tlv:
    """
    Tag-length-value descriptor for one DER element.

    `start` is the offset of the first content byte, `end` the offset just
    past the last one. The content itself is not consumed by reading a Tlv.
    """

    tag: int
    length: int
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class BitString:
    """Content of a DER BIT STRING: payload bytes plus the unused-bits count."""

    data: bytes
    unused_bits: int

    @property
    def bit_length(self) -> int:
        return len(self.data) * 8 - self.unused_bits


@dataclass(frozen=True, slots=True)
class DistinguishedNamePart:
    """One attribute of a Name, e.g. CN=DigiCert Global Root CA."""

    name: str
    value: str
    oid: str


class ValidityStatus(Enum):
    VALID = "valid"
    NOT_YET_VALID = "not-yet-valid"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class ValidityReport:
    status: ValidityStatus
    days_remaining: int


@dataclass(frozen=True, slots=True)
class Validity:
    """
    The certificate validity window. Both bounds are UTC-aware datetimes.
    """

    not_before: datetime
    not_after: datetime

    def classify(self, now: datetime | None = None) -> ValidityReport:
        """
        Classify the window relative to `now` (defaults to the current time).

        Bounds are inclusive. `days_remaining` is floored, so it is negative
        once the certificate has expired.
        """
        now = now or datetime.now(UTC)
        days_remaining = (self.not_after - now) // timedelta(days=1)
        if now < self.not_before:
            status = ValidityStatus.NOT_YET_VALID
        elif now > self.not_after:
            status = ValidityStatus.EXPIRED
        else:
            status = ValidityStatus.VALID
        return ValidityReport(status=status, days_remaining=days_remaining)


@dataclass(frozen=True, slots=True)
class Extension:
    """
    An X.509v3 extension. The value is kept opaque as colon-separated hex;
    extension-specific structures are not decoded.
    """

    oid: str
    name: str
    value_hex: str
    critical: bool = False


type DistinguishedName = tuple[DistinguishedNamePart, ...]


def _first_value(parts: DistinguishedName, name: str) -> str | None:
    for part in parts:
        if part.name == name:
            return part.value
    return None


@dataclass(frozen=True, slots=True)
class CertificateRecord:
    """
    The decoded certificate — the single result of one decode call.

    Algorithm fields hold the display name (or the dotted OID when the
    registry does not know it); the matching `*_oid` fields always hold
    the dotted OID.
    """

    version: int
    serial_number_hex: str
    signature_algorithm: str
    signature_algorithm_oid: str
    issuer: DistinguishedName
    validity: Validity
    subject: DistinguishedName
    public_key_algorithm: str
    public_key_algorithm_oid: str
    public_key_bits: int
    cert_signature_algorithm: str
    cert_signature_algorithm_oid: str
    cert_signature_hex: str = field(repr=False)
    extensions: tuple[Extension, ...] = ()

    @property
    def issuer_common_name(self) -> str | None:
        return _first_value(self.issuer, "CN")

    @property
    def subject_common_name(self) -> str | None:
        return _first_value(self.subject, "CN")

    @property
    def is_self_issued(self) -> bool:
        return self.issuer == self.subject

    def signature_hex_lines(self, width: int = 60) -> list[str]:
        """Split the signature hex into lines of at most `width` characters."""
        hex_text = self.cert_signature_hex
        return [hex_text[i : i + width] for i in range(0, len(hex_text), width)]

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation (datetimes as ISO 8601 strings)."""
        return {
            "version": self.version,
            "serial_number": self.serial_number_hex,
            "signature_algorithm": {
                "name": self.signature_algorithm,
                "oid": self.signature_algorithm_oid,
            },
            "issuer": [_part_to_dict(p) for p in self.issuer],
            "validity": {
                "not_before": self.validity.not_before.isoformat(),
                "not_after": self.validity.not_after.isoformat(),
            },
            "subject": [_part_to_dict(p) for p in self.subject],
            "public_key": {
                "algorithm": self.public_key_algorithm,
                "oid": self.public_key_algorithm_oid,
                "bits": self.public_key_bits,
            },
            "extensions": [
                {
                    "oid": ext.oid,
                    "name": ext.name,
                    "critical": ext.critical,
                    "value": ext.value_hex,
                }
                for ext in self.extensions
            ],
            "certificate_signature": {
                "algorithm": self.cert_signature_algorithm,
                "oid": self.cert_signature_algorithm_oid,
                "value": self.cert_signature_hex,
            },
        }


def _part_to_dict(part: DistinguishedNamePart) -> dict[str, str]:
    return {"name": part.name, "oid": part.oid, "value": part.value}
