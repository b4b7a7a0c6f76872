"""
Unit tests for the plain-text report.

Uses a fixed `now` so the validity status line is deterministic.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from cert_decoder import decode
from cert_decoder.config import DecoderSettings
from cert_decoder.report import (
    describe_status,
    format_distinguished_name,
    render_text,
    truncate_value,
)
from tests.der_builder import build_certificate, build_tbs, extension, extensions_field, to_pem

BEFORE_EXPIRY = datetime(2031, 11, 9, 12, tzinfo=UTC)


@pytest.fixture()
def settings() -> DecoderSettings:
    return DecoderSettings(_env_file=None)


class TestHelpers:
    def test_format_distinguished_name(self, digicert_pem: str) -> None:
        record = decode(digicert_pem)
        assert format_distinguished_name(record.subject) == (
            "C=US, O=DigiCert Inc, OU=www.digicert.com, CN=DigiCert Global Root CA"
        )

    def test_short_value_is_untouched(self) -> None:
        assert truncate_value("A" * 200) == "A" * 200

    def test_long_value_is_cut_to_preview(self) -> None:
        assert truncate_value("A" * 201) == "A" * 100 + "..."

    def test_custom_limits(self) -> None:
        assert truncate_value("ABCDEFGH", limit=4, preview=2) == "AB..."

    def test_describe_status(self, digicert_pem: str) -> None:
        validity = decode(digicert_pem).validity
        assert describe_status(validity, BEFORE_EXPIRY) == "Valid (0 days remaining)"
        assert describe_status(validity, datetime(2032, 1, 1, tzinfo=UTC)) == "Expired"
        assert describe_status(validity, datetime(2000, 1, 1, tzinfo=UTC)) == "Not yet valid"


class TestRenderText:
    def test_digicert_report(self, digicert_pem: str, settings: DecoderSettings) -> None:
        """
        GIVEN the DigiCert root and a clock half a day before expiry
        WHEN rendered
        THEN every section appears with the expected values.
        """
        text = render_text(decode(digicert_pem), now=BEFORE_EXPIRY, settings=settings)
        lines = text.splitlines()

        assert lines[:2] == ["Certificate Information", "=" * 23]
        assert "Version: v3" in lines
        assert "    08:3B:E0:56:90:42:46:B1:A1:75:6A:C9:59:91:C7:4A" in lines
        assert "Signature Algorithm: SHA-1 with RSA" in lines
        assert "    Not Before: Fri, 10 Nov 2006 00:00:00 GMT" in lines
        assert "    Not After: Mon, 10 Nov 2031 00:00:00 GMT" in lines
        assert "    Status: Valid (0 days remaining)" in lines
        assert "    Key Size: 2160 bits" in lines
        assert "    [1] Key Usage [CRITICAL]" in lines
        assert "    [3] Subject Key Identifier" in lines
        assert "        Value: 03:02:01:86" in lines
        assert text.endswith("\n")

    def test_name_descriptions(self, digicert_pem: str, settings: DecoderSettings) -> None:
        lines = render_text(decode(digicert_pem), now=BEFORE_EXPIRY, settings=settings).splitlines()
        index = lines.index("    CN = DigiCert Global Root CA")
        assert lines[index + 1].startswith("        ↳ Common Name")

    def test_signature_is_wrapped(self, digicert_pem: str, settings: DecoderSettings) -> None:
        """
        GIVEN a 256-byte signature (767 hex characters with colons)
        WHEN rendered at the default width
        THEN it spans 12 full lines of 60 characters plus a 47-character tail.
        """
        lines = render_text(decode(digicert_pem), now=BEFORE_EXPIRY, settings=settings).splitlines()
        start = lines.index("    Signature (hex):") + 1
        signature_lines = [line.strip() for line in lines[start:]]
        assert [len(line) for line in signature_lines] == [60] * 12 + [47]

    def test_long_extension_value_is_truncated(self, settings: DecoderSettings) -> None:
        tail = extensions_field(extension("2.5.29.17", b"\x30" + b"\x11" * 99))
        record = decode(to_pem(build_certificate(build_tbs(version=3, tail=tail))))
        assert len(record.extensions[0].value_hex) == 299

        text = render_text(record, settings=settings)
        expected = record.extensions[0].value_hex[:100] + "..."
        assert f"        Value: {expected}" in text.splitlines()

    def test_no_extensions_section_for_v1(self, settings: DecoderSettings) -> None:
        record = decode(to_pem(build_certificate(build_tbs(version=None))))
        assert "Extensions:" not in render_text(record, settings=settings)

    def test_custom_signature_width(self, digicert_pem: str) -> None:
        settings = DecoderSettings(signature_line_width=30, _env_file=None)
        lines = render_text(decode(digicert_pem), now=BEFORE_EXPIRY, settings=settings).splitlines()
        start = lines.index("    Signature (hex):") + 1
        assert max(len(line.strip()) for line in lines[start:]) == 30
