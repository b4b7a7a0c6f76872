"""
OID registry — display names for the object identifiers found in X.509
certificates.

Name attributes map to their conventional short names (CN, O, ...), which is
what distinguished-name rendering uses. Lookups never fail: an identifier
missing from the registry resolves to its own dotted-decimal string.
"""

from __future__ import annotations

from types import MappingProxyType

# ─────────────────────── Name attributes (X.520 / RFC 4519) ───────────────────────

NAME_ATTRIBUTES = {
    "2.5.4.3": "CN",
    "2.5.4.4": "SN",
    "2.5.4.5": "serialNumber",
    "2.5.4.6": "C",
    "2.5.4.7": "L",
    "2.5.4.8": "ST",
    "2.5.4.9": "STREET",
    "2.5.4.10": "O",
    "2.5.4.11": "OU",
    "2.5.4.12": "title",
    "2.5.4.17": "postalCode",
    "2.5.4.42": "GN",
    "2.5.4.97": "organizationIdentifier",
    "1.2.840.113549.1.9.1": "emailAddress",
    "0.9.2342.19200300.100.1.1": "UID",
    "0.9.2342.19200300.100.1.25": "DC",
    "1.3.6.1.4.1.311.60.2.1.3": "jurisdictionC",
}

# ─────────────────────── Algorithms ───────────────────────

ALGORITHMS = {
    "1.2.840.113549.1.1.1": "RSA Encryption",
    "1.2.840.113549.1.1.4": "MD5 with RSA",
    "1.2.840.113549.1.1.5": "SHA-1 with RSA",
    "1.2.840.113549.1.1.10": "RSASSA-PSS",
    "1.2.840.113549.1.1.11": "SHA-256 with RSA",
    "1.2.840.113549.1.1.12": "SHA-384 with RSA",
    "1.2.840.113549.1.1.13": "SHA-512 with RSA",
    "1.2.840.10040.4.1": "DSA",
    "1.2.840.10045.2.1": "EC Public Key",
    "1.2.840.10045.4.1": "ECDSA with SHA-1",
    "1.2.840.10045.4.3.2": "ECDSA with SHA-256",
    "1.2.840.10045.4.3.3": "ECDSA with SHA-384",
    "1.2.840.10045.4.3.4": "ECDSA with SHA-512",
    "1.3.101.112": "Ed25519",
    "1.3.101.113": "Ed448",
}

# ─────────────────────── Extensions (RFC 5280 and friends) ───────────────────────

EXTENSIONS = {
    "2.5.29.14": "Subject Key Identifier",
    "2.5.29.15": "Key Usage",
    "2.5.29.17": "Subject Alternative Name",
    "2.5.29.18": "Issuer Alternative Name",
    "2.5.29.19": "Basic Constraints",
    "2.5.29.30": "Name Constraints",
    "2.5.29.31": "CRL Distribution Points",
    "2.5.29.32": "Certificate Policies",
    "2.5.29.35": "Authority Key Identifier",
    "2.5.29.36": "Policy Constraints",
    "2.5.29.37": "Extended Key Usage",
    "2.5.29.46": "Freshest CRL",
    "2.5.29.54": "Inhibit anyPolicy",
    "1.3.6.1.5.5.7.1.1": "Authority Information Access",
    "1.3.6.1.5.5.7.1.11": "Subject Information Access",
    "1.3.6.1.5.5.7.1.24": "TLS Feature",
    "1.3.6.1.4.1.11129.2.4.2": "CT Precertificate SCTs",
}

OID_NAMES = MappingProxyType({**NAME_ATTRIBUTES, **ALGORITHMS, **EXTENSIONS})


def resolve(oid: str) -> str:
    """Display name for `oid`, or `oid` itself when unknown."""
    return OID_NAMES.get(oid, oid)


def is_known(oid: str) -> bool:
    return oid in OID_NAMES
