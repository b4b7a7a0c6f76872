"""
Error taxonomy for certificate decoding.

A decode either produces a complete CertificateRecord or raises exactly one
CertificateDecodeError. The `kind` tells the caller what went wrong; the
message is human-readable and already carries positional context.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorKind(Enum):
    """Failure kinds surfaced at the decode boundary."""

    EMPTY_INPUT = "EMPTY_INPUT"
    """Input is blank after trimming."""

    MISSING_PEM_HEADER = "MISSING_PEM_HEADER"
    """Input lacks the `BEGIN CERTIFICATE` marker."""

    INVALID_BASE64 = "INVALID_BASE64"
    """PEM body is not valid base64."""

    TRUNCATED_INPUT = "TRUNCATED_INPUT"
    """A read requested more bytes than remain in the buffer."""

    UNEXPECTED_TAG = "UNEXPECTED_TAG"
    """A grammatically-required tag did not match (strict mode, or time fields)."""

    INVALID_LENGTH = "INVALID_LENGTH"
    """Length octets are not valid DER (indefinite form)."""

    INVALID_TIME = "INVALID_TIME"
    """UTCTime/GeneralizedTime content could not be parsed."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Unexpected failure not raised by the decoder itself."""


class CertificateDecodeError(Exception):
    """Raised when a certificate cannot be decoded."""

    def __init__(self, kind: ErrorKind, message: str, offset: int | None = None) -> None:
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.offset = offset

    def __repr__(self) -> str:
        return f"CertificateDecodeError({self.kind.value}: {self.message!r})"
