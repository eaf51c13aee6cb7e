"""On-demand block reads from a tile's backing file."""

from __future__ import annotations

import logging
from pathlib import Path

from tile_documents.domain.entities import TileContent
from tile_documents.domain.exceptions import BlockNotFoundException, BlockReadException

logger = logging.getLogger(__name__)


class BlockReader:
    """Seeks into the tile file and reads one block payload per call.

    The file is reopened on every read; no handle is kept between calls.
    """

    def read(self, tile: TileContent, cid: str) -> bytes:
        location = tile.index.get(cid)
        if location is None:
            raise BlockNotFoundException(f"block not found for CID {cid}")
        offset, length = location
        return self.read_range(tile.path, offset, length)

    @staticmethod
    def read_range(path: Path, offset: int, length: int) -> bytes:
        try:
            with open(path, "rb") as f:
                f.seek(offset)
                data = f.read(length)
        except OSError as e:
            raise BlockReadException(f"failed to read block from '{path}': {e}") from e

        if len(data) != length:
            raise BlockReadException(
                f"short read from '{path}' at offset {offset}: "
                f"expected {length} bytes, got {len(data)}"
            )
        logger.debug("Read %d bytes at offset %d from %s", length, offset, path)
        return data
