"""
Certificate decoding entry points.

  decode(pem_text)       PEM text → CertificateRecord (raises on failure)
  decode_der(data)       DER bytes → CertificateRecord (raises on failure)
  PemCertificateDecoder  Result-returning adapter implementing the
                         CertificateDecoder port

Each call creates its own DerCursor over its own buffer, so concurrent
decodes share nothing.
"""

from __future__ import annotations

import structlog

from cert_decoder.asn1.cursor import DerCursor
from cert_decoder.domain.errors import CertificateDecodeError
from cert_decoder.domain.models import CertificateRecord
from cert_decoder.pem import pem_to_der
from cert_decoder.railway.result import Result
from cert_decoder.x509.grammar import walk_certificate

log = structlog.get_logger()


def decode_der(data: bytes, *, strict: bool = False) -> CertificateRecord:
    """
    Decode a DER-encoded X.509 certificate.

    With `strict=True` every grammatically-required tag is checked.
    Raises CertificateDecodeError; there is no partial result.
    """
    return walk_certificate(DerCursor(data), strict=strict)


def decode(pem_text: str, *, strict: bool = False) -> CertificateRecord:
    """
    Decode a PEM-armored certificate.

    Raises CertificateDecodeError with kind EMPTY_INPUT, MISSING_PEM_HEADER,
    INVALID_BASE64 or one of the DER kinds.
    """
    return decode_der(pem_to_der(pem_text), strict=strict)


class PemCertificateDecoder:
    """
    Decode PEM text into a Result[CertificateRecord].

    Implements the CertificateDecoder port. Decode errors are caught at this
    boundary via Result.from_computation() and keep their ErrorKind.
    """

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        return self._strict

    def decode(self, pem_text: str) -> Result[CertificateRecord]:
        return (
            Result.from_computation(
                lambda: decode(pem_text, strict=self._strict),
                "Unexpected error while decoding certificate",
            )
            .peek(_log_decoded)
            .peek_failure(
                lambda err: log.warning(
                    "decoder.failed",
                    kind=err.kind.value,
                    offset=err.offset,
                    message=err.message,
                )
            )
        )


def _log_decoded(record: CertificateRecord) -> None:
    log.info(
        "decoder.decoded",
        version=record.version,
        serial=record.serial_number_hex,
        subject=record.subject_common_name,
        extensions=len(record.extensions),
    )


__all__ = ["CertificateDecodeError", "PemCertificateDecoder", "decode", "decode_der"]
