"""Adapter over cbor2 for decoding DAG-CBOR header documents.

The decoded tree is plain Python values: ``dict`` for maps, ``list`` for
arrays, ``str`` for text, ``bytes`` for byte strings and ``cbor2.CBORTag``
for tagged values. The accessors below return None when a value has a
different shape, so callers decide whether that is an error.
"""

from __future__ import annotations

from typing import Any

import cbor2

from tile_documents.domain.exceptions import TileFormatException

from .cid import ContentIdentifier, read_content_identifier

CID_LINK_TAG = 42
IDENTITY_MULTIBASE_PREFIX = 0x00


def decode_document(data: bytes) -> Any:
    """Decode one complete CBOR document."""
    try:
        return cbor2.loads(data)
    except cbor2.CBORDecodeError as e:
        raise TileFormatException(f"CBOR decode error: {e}") from e


def as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    return None


def as_map(value: Any) -> dict[Any, Any] | None:
    if isinstance(value, dict):
        return value
    return None


def as_array(value: Any) -> list[Any] | None:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def as_link(value: Any) -> ContentIdentifier | None:
    """Decode a CID link encoded as ``Tag(42, Bytes(0x00 || cid))``."""
    if not isinstance(value, cbor2.CBORTag) or value.tag != CID_LINK_TAG:
        return None
    raw = value.value
    if not isinstance(raw, (bytes, bytearray)):
        return None
    if raw[:1] == bytes((IDENTITY_MULTIBASE_PREFIX,)):
        raw = raw[1:]
    decoded = read_content_identifier(bytes(raw))
    if decoded is None:
        return None
    # Bytes after the identifier are ignored.
    return decoded[0]
