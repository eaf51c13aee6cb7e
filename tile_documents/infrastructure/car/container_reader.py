"""Binary container reader for .tile (CARv1) files.

Layout::

    uvarint header_len | header (DAG-CBOR manifest) | block*
    block = uvarint block_len | CID | payload

A block length of zero ends the block sequence early.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tile_documents.domain.entities import Manifest, TileContent
from tile_documents.domain.exceptions import TileFormatException, TileLoadException

from .cid import read_content_identifier
from .manifest_parser import parse_manifest
from .varint import read_uvarint

logger = logging.getLogger(__name__)


class CarContainerReader:
    """Reads a tile file into a manifest plus a block offset index."""

    def read(self, path: Path) -> TileContent:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise TileLoadException(f"Cannot read tile file '{path}': {e}") from e

        view = memoryview(data)
        manifest, pos = self._parse_header(view)
        index = self._index_blocks(view, pos)
        logger.debug("Tile %s: indexed %d blocks", path, len(index))
        return TileContent(path=path, manifest=manifest, index=index)

    @staticmethod
    def _parse_header(data: memoryview) -> tuple[Manifest, int]:
        decoded = read_uvarint(data, 0)
        if decoded is None:
            raise TileFormatException("failed to read CAR header varint")
        header_len, n = decoded

        header_end = n + header_len
        if header_end > len(data):
            raise TileFormatException("CAR header length exceeds file size")

        manifest = parse_manifest(bytes(data[n:header_end]))
        return manifest, header_end

    @staticmethod
    def _index_blocks(data: memoryview, pos: int) -> dict[str, tuple[int, int]]:
        """Map each block's CID string to the (offset, length) of its payload."""
        index: dict[str, tuple[int, int]] = {}
        size = len(data)

        while pos < size:
            decoded = read_uvarint(data, pos)
            if decoded is None:
                raise TileFormatException(f"failed to read block varint at pos {pos}")
            block_len, n = decoded
            pos += n

            if block_len == 0:
                break

            block_end = pos + block_len
            if block_end > size:
                raise TileFormatException(f"block extends beyond file at pos {pos}")

            parsed = read_content_identifier(data, pos, block_end)
            if parsed is None:
                raise TileFormatException(f"failed to parse CID at pos {pos}")
            cid, cid_len = parsed

            # Later duplicates overwrite earlier entries.
            index[str(cid)] = (pos + cid_len, block_len - cid_len)
            pos = block_end

        return index
