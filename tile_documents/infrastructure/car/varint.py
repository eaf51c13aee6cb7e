"""Unsigned LEB128 varint decoding."""

from __future__ import annotations

# Nine 7-bit groups hold 63 bits; anything longer is rejected.
MAX_GROUPS = 9


def read_uvarint(data: bytes, pos: int = 0) -> tuple[int, int] | None:
    """Decode an unsigned varint starting at ``pos``.

    Returns ``(value, bytes_consumed)``, or None when the buffer ends before
    a terminating byte or the encoding runs past nine groups.
    """
    value = 0
    end = min(len(data), pos + MAX_GROUPS)
    for i in range(pos, end):
        byte = data[i]
        value |= (byte & 0x7F) << (7 * (i - pos))
        if byte & 0x80 == 0:
            return value, i - pos + 1
    return None
