"""Self-describing content identifiers (CIDv0 / CIDv1).

A CIDv1 is laid out as varints ``version | codec | hash-code | digest-size``
followed by the digest. A CIDv0 is a bare sha2-256 multihash
(``0x12 0x20`` + 32 digest bytes). Unknown codecs and hash functions are
accepted as long as the structure is intact.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass

from .varint import read_uvarint

SHA2_256 = 0x12
SHA2_256_SIZE = 0x20
DAG_PB = 0x70

CIDV0_LENGTH = 2 + SHA2_256_SIZE

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


@dataclass(frozen=True)
class ContentIdentifier:
    version: int
    codec: int
    hash_code: int
    digest: bytes
    raw: bytes

    def __str__(self) -> str:
        if self.version == 0:
            return base58btc_encode(self.raw)
        return "b" + base64.b32encode(self.raw).decode("ascii").lower().rstrip("=")


def read_content_identifier(
    data: bytes, pos: int = 0, end: int | None = None
) -> tuple[ContentIdentifier, int] | None:
    """Decode one identifier from ``data[pos:end]``.

    Returns ``(identifier, bytes_consumed)`` or None when the bytes do not
    hold a structurally valid identifier.
    """
    if end is None:
        end = len(data)
    window = memoryview(data)[:end]

    if window[pos : pos + 2] == bytes((SHA2_256, SHA2_256_SIZE)):
        if pos + CIDV0_LENGTH > end:
            return None
        raw = bytes(window[pos : pos + CIDV0_LENGTH])
        return ContentIdentifier(0, DAG_PB, SHA2_256, raw[2:], raw), CIDV0_LENGTH

    cursor = pos
    fields: list[int] = []
    for _ in range(4):
        decoded = read_uvarint(window, cursor)
        if decoded is None:
            return None
        value, n = decoded
        fields.append(value)
        cursor += n
    version, codec, hash_code, digest_size = fields

    if version != 1:
        return None
    if cursor + digest_size > end:
        return None

    digest = bytes(window[cursor : cursor + digest_size])
    cursor += digest_size
    raw = bytes(window[pos:cursor])
    return ContentIdentifier(version, codec, hash_code, digest, raw), cursor - pos


def base58btc_encode(data: bytes) -> str:
    zeros = len(data) - len(data.lstrip(b"\x00"))
    number = int.from_bytes(data, "big")
    chars: list[str] = []
    while number:
        number, rem = divmod(number, 58)
        chars.append(BASE58_ALPHABET[rem])
    return "1" * zeros + "".join(reversed(chars))
