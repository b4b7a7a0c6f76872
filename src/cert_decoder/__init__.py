"""
cert_decoder — X.509 certificate decoder.

Decodes PEM-armored certificates with a hand-written DER reader and a walk
of the X.509 Certificate grammar, producing an immutable CertificateRecord:
version, serial number, algorithms, issuer/subject names, validity window,
public-key info and (for v3) the extension list.

    from cert_decoder import decode

    record = decode(pem_text)
    record.subject_common_name
"""

__version__ = "0.1.0"

from cert_decoder.decoder import PemCertificateDecoder, decode, decode_der  # noqa: E402
from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind  # noqa: E402
from cert_decoder.domain.models import CertificateRecord  # noqa: E402

__all__ = [
    "CertificateDecodeError",
    "CertificateRecord",
    "ErrorKind",
    "PemCertificateDecoder",
    "decode",
    "decode_der",
]
