"""
PEM decoder — turns an armored certificate into raw DER bytes.

Only the certificate armor is recognised. Delimiter lines and all
whitespace are stripped before base64 decoding; line wrapping is arbitrary.
"""

from __future__ import annotations

import base64
import binascii
import re

from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind

PEM_MARKER = "BEGIN CERTIFICATE"
_ARMOR = re.compile(r"-----(?:BEGIN|END) CERTIFICATE-----")
_WHITESPACE = re.compile(r"\s+")


def validate_pem(pem_text: str) -> str:
    """Return the trimmed input, or raise EMPTY_INPUT / MISSING_PEM_HEADER."""
    trimmed = pem_text.strip()
    if not trimmed:
        raise CertificateDecodeError(ErrorKind.EMPTY_INPUT, "Please enter a PEM encoded certificate")
    if PEM_MARKER not in trimmed:
        raise CertificateDecodeError(
            ErrorKind.MISSING_PEM_HEADER,
            f'Invalid PEM format. Must contain "{PEM_MARKER}" header',
        )
    return trimmed


def pem_to_der(pem_text: str) -> bytes:
    """Validate, strip the armor and base64-decode a PEM certificate."""
    body = _WHITESPACE.sub("", _ARMOR.sub("", validate_pem(pem_text)))
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CertificateDecodeError(ErrorKind.INVALID_BASE64, f"PEM body is not valid base64: {e}") from e
