"""
Ports — Protocol-based interfaces between the decoder and its callers.

The HTTP and command-line layers depend on these contracts, not on the
concrete decoder, so tests can inject fakes returning canned Results.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cert_decoder.domain.models import CertificateRecord
from cert_decoder.railway.result import Result


@runtime_checkable
class CertificateDecoder(Protocol):
    """
    Port: decode a PEM-armored certificate into a CertificateRecord.

    Returns Result.failure with the decoder's ErrorKind on any problem;
    never raises for bad input.
    """

    def decode(self, pem_text: str) -> Result[CertificateRecord]: ...
