"""In-memory registry of loaded tiles keyed by authority."""

from __future__ import annotations

import logging
import threading

from tile_documents.domain.entities import TileContent

logger = logging.getLogger(__name__)


class TileStore:
    """Thread-safe authority -> TileContent map.

    Entries are inserted or replaced on open and kept for the lifetime of
    the process. The lock only guards the map; callers read blocks after
    the lookup returns, outside the lock.
    """

    def __init__(self) -> None:
        self._tiles: dict[str, TileContent] = {}
        self._lock = threading.Lock()

    def put(self, authority: str, tile: TileContent) -> None:
        with self._lock:
            replaced = authority in self._tiles
            self._tiles[authority] = tile
        if replaced:
            logger.info("Replaced tile '%s' with %s", authority, tile.path)

    def get(self, authority: str) -> TileContent | None:
        with self._lock:
            return self._tiles.get(authority)

    def authorities(self) -> list[str]:
        with self._lock:
            return sorted(self._tiles)

    def snapshot(self) -> dict[str, TileContent]:
        with self._lock:
            return dict(self._tiles)

    def __contains__(self, authority: str) -> bool:
        with self._lock:
            return authority in self._tiles

    def __len__(self) -> int:
        with self._lock:
            return len(self._tiles)
