"""
Plain-text certificate report.

Renders a CertificateRecord the way the certificate viewer presents it:
sections for version, serial, algorithms, names, validity status, public
key, numbered extensions and the wrapped signature. Truncation of long
extension values happens here only; the record always keeps the full hex.
"""

from __future__ import annotations

from datetime import datetime

from cert_decoder.config import DecoderSettings
from cert_decoder.domain.models import (
    CertificateRecord,
    DistinguishedName,
    Extension,
    Validity,
    ValidityStatus,
)

DN_FIELD_DESCRIPTIONS = {
    "CN": "Common Name - The name of the entity (person, server, organization)",
    "C": "Country - Two-letter country code (ISO 3166)",
    "ST": "State/Province - State or province name",
    "L": "Locality - City or locality name",
    "O": "Organization - Legal organization name",
    "OU": "Organizational Unit - Division or department within the organization",
}

_INDENT = "    "
_TIME_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def format_distinguished_name(parts: DistinguishedName) -> str:
    """One-line form: 'C=US, O=DigiCert Inc, CN=DigiCert Global Root CA'."""
    return ", ".join(f"{part.name}={part.value}" for part in parts)


def truncate_value(value: str, limit: int = 200, preview: int = 100) -> str:
    """Cut values longer than `limit` to their first `preview` characters plus '...'."""
    if len(value) <= limit:
        return value
    return f"{value[:preview]}..."


def describe_status(validity: Validity, now: datetime | None = None) -> str:
    report = validity.classify(now)
    match report.status:
        case ValidityStatus.VALID:
            return f"Valid ({report.days_remaining} days remaining)"
        case ValidityStatus.NOT_YET_VALID:
            return "Not yet valid"
        case ValidityStatus.EXPIRED:
            return "Expired"
    raise TypeError("unreachable")  # pragma: no cover


def _name_lines(parts: DistinguishedName) -> list[str]:
    lines: list[str] = []
    for part in parts:
        lines.append(f"{_INDENT}{part.name} = {part.value}")
        description = DN_FIELD_DESCRIPTIONS.get(part.name)
        if description:
            lines.append(f"{_INDENT * 2}↳ {description}")
    return lines


def _extension_lines(extensions: tuple[Extension, ...], settings: DecoderSettings) -> list[str]:
    lines: list[str] = []
    for index, ext in enumerate(extensions, start=1):
        marker = " [CRITICAL]" if ext.critical else ""
        value = truncate_value(ext.value_hex, settings.extension_value_limit, settings.extension_value_preview)
        lines.append(f"{_INDENT}[{index}] {ext.name}{marker}")
        lines.append(f"{_INDENT * 2}OID: {ext.oid}")
        lines.append(f"{_INDENT * 2}Value: {value}")
    return lines


def render_text(
    record: CertificateRecord,
    now: datetime | None = None,
    settings: DecoderSettings | None = None,
) -> str:
    """Render the full report. `now` drives the validity status line."""
    settings = settings or DecoderSettings()
    validity = record.validity

    lines = [
        "Certificate Information",
        "=" * 23,
        f"Version: v{record.version}",
        "Serial Number:",
        f"{_INDENT}{record.serial_number_hex}",
        f"Signature Algorithm: {record.signature_algorithm}",
        f"{_INDENT}OID: {record.signature_algorithm_oid}",
        "Issuer:",
        *_name_lines(record.issuer),
        "Validity:",
        f"{_INDENT}Not Before: {validity.not_before.strftime(_TIME_FORMAT)}",
        f"{_INDENT}Not After: {validity.not_after.strftime(_TIME_FORMAT)}",
        f"{_INDENT}Status: {describe_status(validity, now)}",
        "Subject:",
        *_name_lines(record.subject),
        "Subject Public Key Info:",
        f"{_INDENT}Algorithm: {record.public_key_algorithm}",
        f"{_INDENT}OID: {record.public_key_algorithm_oid}",
        f"{_INDENT}Key Size: {record.public_key_bits} bits",
    ]

    if record.extensions:
        lines.append("Extensions:")
        lines.extend(_extension_lines(record.extensions, settings))

    lines.append("Certificate Signature:")
    lines.append(f"{_INDENT}Algorithm: {record.cert_signature_algorithm}")
    lines.append(f"{_INDENT}Signature (hex):")
    lines.extend(f"{_INDENT * 2}{line}" for line in record.signature_hex_lines(settings.signature_line_width))
    return "\n".join(lines) + "\n"
