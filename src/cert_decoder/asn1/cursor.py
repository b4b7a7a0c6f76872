"""
DER cursor — a forward-only reader over one DER byte buffer.

The cursor owns the only mutable state of a decode: its offset. One cursor
is created per decode call and is never shared.

Every read checks bounds first; reading past the end of the buffer raises
CertificateDecodeError(TRUNCATED_INPUT). Tag-consuming reads accept an
optional `expected` tag which, when given, must match or the read raises
UNEXPECTED_TAG.
"""

from __future__ import annotations

from cert_decoder.domain.errors import CertificateDecodeError, ErrorKind
from cert_decoder.domain.models import BitString, Tlv

# ─────────────────────── Universal tags ───────────────────────

TAG_BOOLEAN = 0x01
TAG_INTEGER = 0x02
TAG_BIT_STRING = 0x03
TAG_OCTET_STRING = 0x04
TAG_OID = 0x06
TAG_UTF8_STRING = 0x0C
TAG_PRINTABLE_STRING = 0x13
TAG_T61_STRING = 0x14
TAG_IA5_STRING = 0x16
TAG_UTC_TIME = 0x17
TAG_GENERALIZED_TIME = 0x18
TAG_UNIVERSAL_STRING = 0x1C
TAG_BMP_STRING = 0x1E
TAG_SEQUENCE = 0x30
TAG_SET = 0x31

STRING_TAGS = frozenset(
    {
        TAG_UTF8_STRING,
        TAG_PRINTABLE_STRING,
        TAG_T61_STRING,
        TAG_IA5_STRING,
        TAG_UNIVERSAL_STRING,
        TAG_BMP_STRING,
    }
)


def decode_oid(body: bytes) -> str:
    """
    Decode the content octets of an OBJECT IDENTIFIER to dotted-decimal.

    Each arc is base-128, high bit set on every byte but the last. The first
    value packs the first two arcs: v < 80 gives (v // 40, v % 40), larger
    values belong to arc 2.
    """
    arcs: list[int] = []
    value = 0
    for byte in body:
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            if not arcs:
                if value < 80:
                    arcs.extend((value // 40, value % 40))
                else:
                    arcs.extend((2, value - 80))
            else:
                arcs.append(value)
            value = 0
    return ".".join(str(arc) for arc in arcs)


def decode_text(tag: int, body: bytes) -> str:
    """
    Decode string content. Never raises: anything that fails to decode in
    its declared encoding maps byte-for-byte through Latin-1.
    """
    encoding = "utf-8"
    if tag == TAG_BMP_STRING:
        encoding = "utf-16-be"
    elif tag == TAG_UNIVERSAL_STRING:
        encoding = "utf-32-be"
    try:
        return body.decode(encoding)
    except UnicodeDecodeError:
        return body.decode("latin-1")


def to_hex(data: bytes) -> str:
    """Colon-separated uppercase hex, e.g. b'\\x08\\x3b' -> '08:3B'."""
    return data.hex(":").upper()


class DerCursor:
    """Stateful reader over a DER buffer."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = bytes(data)
        self.offset = 0
        self.seek(offset)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def remaining(self) -> int:
        return len(self._data) - self.offset

    def at_end(self) -> bool:
        return self.offset >= len(self._data)

    # ──────────────────────── Positioning ────────────────────────

    def seek(self, offset: int) -> None:
        """Move to an absolute offset inside the buffer."""
        if not 0 <= offset <= len(self._data):
            raise CertificateDecodeError(
                ErrorKind.TRUNCATED_INPUT,
                f"Cannot seek to {offset}, buffer holds {len(self._data)} bytes",
                self.offset,
            )
        self.offset = offset

    def skip(self, tlv: Tlv) -> None:
        """Jump past the content of a previously read TLV."""
        self.seek(tlv.end)

    def _require(self, count: int) -> None:
        if count < 0 or self.offset + count > len(self._data):
            raise CertificateDecodeError(
                ErrorKind.TRUNCATED_INPUT,
                f"Need {count} byte(s) but only {self.remaining} remain",
                self.offset,
            )

    # ──────────────────────── Primitive reads ────────────────────────

    def read_byte(self) -> int:
        self._require(1)
        value = self._data[self.offset]
        self.offset += 1
        return value

    def peek_byte(self) -> int | None:
        """Return the next byte without consuming it, or None at the end."""
        if self.at_end():
            return None
        return self._data[self.offset]

    def read_bytes(self, count: int) -> bytes:
        self._require(count)
        chunk = self._data[self.offset : self.offset + count]
        self.offset += count
        return chunk

    def read_tag(self, expected: int | None = None) -> int:
        position = self.offset
        tag = self.read_byte()
        if expected is not None and tag != expected:
            raise CertificateDecodeError(
                ErrorKind.UNEXPECTED_TAG,
                f"Expected tag 0x{expected:02X}, found 0x{tag:02X}",
                position,
            )
        return tag

    def read_length(self) -> int:
        """
        Read DER length octets: short form (0-127) or long form, where the
        low 7 bits of the first byte count the big-endian length bytes.
        """
        position = self.offset
        first = self.read_byte()
        if not first & 0x80:
            return first
        count = first & 0x7F
        if count == 0:
            raise CertificateDecodeError(
                ErrorKind.INVALID_LENGTH,
                "Indefinite length is not allowed in DER",
                position,
            )
        return int.from_bytes(self.read_bytes(count), "big")

    # ──────────────────────── Structured reads ────────────────────────

    def read_tlv(self, expected: int | None = None) -> Tlv:
        """
        Read tag and length; leave the cursor at the start of the content.

        The declared content must fit in the buffer.
        """
        tag = self.read_tag(expected)
        length = self.read_length()
        start = self.offset
        if start + length > len(self._data):
            raise CertificateDecodeError(
                ErrorKind.TRUNCATED_INPUT,
                f"Element with tag 0x{tag:02X} declares {length} byte(s) "
                f"but only {self.remaining} remain",
                start,
            )
        return Tlv(tag=tag, length=length, start=start, end=start + length)

    def read_sequence(self, expected: int | None = None) -> Tlv:
        return self.read_tlv(expected)

    def read_value(self, expected: int | None = None) -> tuple[int, bytes]:
        """Read a whole primitive element, returning (tag, content)."""
        tlv = self.read_tlv(expected)
        return tlv.tag, self.read_bytes(tlv.length)

    def read_integer(self, strict: bool = False) -> bytes:
        """Raw big-endian two's complement content of an INTEGER."""
        return self.read_value(TAG_INTEGER if strict else None)[1]

    def read_oid(self, strict: bool = False) -> str:
        return decode_oid(self.read_value(TAG_OID if strict else None)[1])

    def read_string(self, strict: bool = False) -> str:
        """Read a directory string. Strict mode rejects non-string tags."""
        position = self.offset
        tag, body = self.read_value()
        if strict and tag not in STRING_TAGS:
            raise CertificateDecodeError(
                ErrorKind.UNEXPECTED_TAG,
                f"Expected a string type, found tag 0x{tag:02X}",
                position,
            )
        return decode_text(tag, body)

    def read_octet_string(self, strict: bool = False) -> bytes:
        return self.read_value(TAG_OCTET_STRING if strict else None)[1]

    def read_boolean(self, strict: bool = False) -> bool:
        body = self.read_value(TAG_BOOLEAN if strict else None)[1]
        return bool(body) and body[0] == 0xFF

    def read_bit_string(self, strict: bool = False) -> BitString:
        """Read a BIT STRING: one unused-bits byte, then length - 1 content bytes."""
        tlv = self.read_tlv(TAG_BIT_STRING if strict else None)
        if tlv.length == 0:
            raise CertificateDecodeError(
                ErrorKind.TRUNCATED_INPUT,
                "BIT STRING has no unused-bits octet",
                tlv.start,
            )
        unused_bits = self.read_byte()
        return BitString(data=self.read_bytes(tlv.length - 1), unused_bits=unused_bits)
