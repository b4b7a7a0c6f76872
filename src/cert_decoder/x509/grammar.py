"""
X.509 grammar walker — drives a DerCursor through the Certificate schema.

    Certificate ::= SEQUENCE {
        tbsCertificate       TBSCertificate,
        signatureAlgorithm   AlgorithmIdentifier,
        signatureValue       BIT STRING }

    TBSCertificate ::= SEQUENCE {
        version         [0]  EXPLICIT Version DEFAULT v1,
        serialNumber         CertificateSerialNumber,
        signature            AlgorithmIdentifier,
        issuer               Name,
        validity             Validity,
        subject              Name,
        subjectPublicKeyInfo SubjectPublicKeyInfo,
        issuerUniqueID  [1]  IMPLICIT UniqueIdentifier OPTIONAL,
        subjectUniqueID [2]  IMPLICIT UniqueIdentifier OPTIONAL,
        extensions      [3]  EXPLICIT Extensions OPTIONAL }

Fields are read in this fixed order. By default the walker trusts its
position in the grammar and does not check the tag of each required field;
with `strict=True` every required tag is verified and a mismatch raises
UNEXPECTED_TAG. Extensions are only read for v3 certificates.
"""

from __future__ import annotations

from cert_decoder.asn1.cursor import (
    TAG_BOOLEAN,
    TAG_SEQUENCE,
    TAG_SET,
    DerCursor,
    to_hex,
)
from cert_decoder.asn1.timestamps import parse_time
from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind
from cert_decoder.domain.models import (
    BitString,
    CertificateRecord,
    DistinguishedName,
    DistinguishedNamePart,
    Extension,
    Validity,
)
from cert_decoder.x509 import oids

TAG_VERSION = 0xA0
TAG_ISSUER_UNIQUE_ID = 0x81
TAG_SUBJECT_UNIQUE_ID = 0x82
TAG_EXTENSIONS = 0xA3

DEFAULT_VERSION = 1
EXTENSIONS_VERSION = 3


def _tag(strict: bool, tag: int) -> int | None:
    return tag if strict else None


# ─────────────────────── Field readers ───────────────────────


def read_version(cursor: DerCursor, strict: bool = False) -> int:
    """
    Read the optional `[0] EXPLICIT INTEGER` version.

    Absent means v1. DER stores the version zero-based, so integer n is v(n+1).
    """
    if cursor.peek_byte() != TAG_VERSION:
        return DEFAULT_VERSION
    wrapper = cursor.read_tlv(TAG_VERSION)
    raw = cursor.read_integer(strict)
    cursor.skip(wrapper)
    return int.from_bytes(raw, "big", signed=True) + 1


def read_algorithm(cursor: DerCursor, strict: bool = False) -> str:
    """
    Read an AlgorithmIdentifier and return its OID. Parameters are skipped.
    """
    sequence = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    oid = cursor.read_oid(strict)
    cursor.skip(sequence)
    return oid


def read_name(cursor: DerCursor, strict: bool = False) -> DistinguishedName:
    """
    Read a Name: SEQUENCE OF SET OF SEQUENCE { type OID, value }.

    Parts come back in encoding order; each attribute of a multi-valued
    RDN becomes its own part.
    """
    name = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    parts: list[DistinguishedNamePart] = []
    while cursor.offset < name.end:
        rdn = cursor.read_sequence(_tag(strict, TAG_SET))
        while cursor.offset < rdn.end:
            attribute = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
            oid = cursor.read_oid(strict)
            value = cursor.read_string(strict)
            parts.append(DistinguishedNamePart(name=oids.resolve(oid), value=value, oid=oid))
            cursor.skip(attribute)
        cursor.skip(rdn)
    cursor.skip(name)
    return tuple(parts)


def read_validity(cursor: DerCursor, strict: bool = False) -> Validity:
    """Read `Validity ::= SEQUENCE { notBefore Time, notAfter Time }`."""
    sequence = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    position = cursor.offset
    tag, body = cursor.read_value()
    not_before = parse_time(tag, body, position)
    position = cursor.offset
    tag, body = cursor.read_value()
    not_after = parse_time(tag, body, position)
    cursor.skip(sequence)
    return Validity(not_before=not_before, not_after=not_after)


def read_public_key_info(cursor: DerCursor, strict: bool = False) -> tuple[str, BitString]:
    """Read SubjectPublicKeyInfo, returning the algorithm OID and the key bits."""
    sequence = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    algorithm_oid = read_algorithm(cursor, strict)
    key = cursor.read_bit_string(strict)
    cursor.skip(sequence)
    return algorithm_oid, key


def read_extension(cursor: DerCursor, strict: bool = False) -> Extension:
    """
    Read `Extension ::= SEQUENCE { extnID, critical BOOLEAN DEFAULT FALSE, extnValue }`.

    The critical flag is only present when the next tag is BOOLEAN.
    """
    sequence = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    oid = cursor.read_oid(strict)
    critical = False
    if cursor.peek_byte() == TAG_BOOLEAN:
        critical = cursor.read_boolean()
    value = cursor.read_octet_string(strict)
    cursor.skip(sequence)
    return Extension(oid=oid, name=oids.resolve(oid), value_hex=to_hex(value), critical=critical)


def read_extensions(cursor: DerCursor, tbs_end: int, strict: bool = False) -> tuple[Extension, ...]:
    """
    Read the `[3]` extensions field from the tail of a TBSCertificate.

    Anything before it (issuerUniqueID [1], subjectUniqueID [2]) is skipped;
    in strict mode nothing else may appear there.
    Returns an empty tuple when no `[3]` field exists before `tbs_end`.
    """
    while cursor.offset < tbs_end and cursor.peek_byte() != TAG_EXTENSIONS:
        position = cursor.offset
        element = cursor.read_tlv()
        if strict and element.tag not in (TAG_ISSUER_UNIQUE_ID, TAG_SUBJECT_UNIQUE_ID):
            raise CertificateDecodeError(
                ErrorKind.UNEXPECTED_TAG,
                f"Unexpected tag 0x{element.tag:02X} before extensions",
                position,
            )
        cursor.skip(element)

    if cursor.offset >= tbs_end:
        return ()

    cursor.read_tlv(TAG_EXTENSIONS)
    sequence = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    extensions: list[Extension] = []
    while cursor.offset < sequence.end:
        extensions.append(read_extension(cursor, strict))
    return tuple(extensions)


# ─────────────────────── Certificate ───────────────────────


def walk_certificate(cursor: DerCursor, strict: bool = False) -> CertificateRecord:
    """
    Walk a complete Certificate and assemble the CertificateRecord.

    Raises CertificateDecodeError on the first structural problem; nothing
    is returned for a partially read certificate.
    """
    cursor.read_sequence(_tag(strict, TAG_SEQUENCE))
    tbs = cursor.read_sequence(_tag(strict, TAG_SEQUENCE))

    version = read_version(cursor, strict)
    serial = cursor.read_integer(strict)
    signature_oid = read_algorithm(cursor, strict)
    issuer = read_name(cursor, strict)
    validity = read_validity(cursor, strict)
    subject = read_name(cursor, strict)
    key_oid, key = read_public_key_info(cursor, strict)

    extensions: tuple[Extension, ...] = ()
    if version == EXTENSIONS_VERSION and cursor.offset < tbs.end:
        extensions = read_extensions(cursor, tbs.end, strict)

    cursor.skip(tbs)
    cert_signature_oid = read_algorithm(cursor, strict)
    signature = cursor.read_bit_string(strict)

    return CertificateRecord(
        version=version,
        serial_number_hex=to_hex(serial),
        signature_algorithm=oids.resolve(signature_oid),
        signature_algorithm_oid=signature_oid,
        issuer=issuer,
        validity=validity,
        subject=subject,
        public_key_algorithm=oids.resolve(key_oid),
        public_key_algorithm_oid=key_oid,
        public_key_bits=key.bit_length,
        extensions=extensions,
        cert_signature_algorithm=oids.resolve(cert_signature_oid),
        cert_signature_algorithm_oid=cert_signature_oid,
        cert_signature_hex=to_hex(signature.data),
    )
