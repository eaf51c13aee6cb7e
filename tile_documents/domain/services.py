"""Domain service: TileService."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .entities import Manifest, ResolvedResource, Resource, TileOpened
from .exceptions import (
    ResourceMissingSrcException,
    ResourceNotFoundException,
    TileNotLoadedException,
)
from .value_objects import authority_from_path, candidate_paths, normalize_request_path

if TYPE_CHECKING:
    from tile_documents.infrastructure.car.block_reader import BlockReader
    from tile_documents.infrastructure.car.container_reader import CarContainerReader
    from tile_documents.infrastructure.storage.tile_store import TileStore

logger = logging.getLogger(__name__)

OpenListener = Callable[[TileOpened], None]


def find_resource(manifest: Manifest, path: str) -> tuple[str, Resource] | None:
    """Return the first (key, resource) matching the path's candidate keys."""
    for candidate in candidate_paths(path):
        resource = manifest.resources.get(candidate)
        if resource is not None:
            return candidate, resource
    return None


class TileService:
    """Opens tiles into the store and resolves request paths against them."""

    def __init__(
        self,
        store: TileStore,
        reader: CarContainerReader,
        block_reader: BlockReader,
    ) -> None:
        self._store = store
        self._reader = reader
        self._block_reader = block_reader
        self._listeners: list[OpenListener] = []

    @property
    def store(self) -> TileStore:
        return self._store

    def add_listener(self, listener: OpenListener) -> None:
        self._listeners.append(listener)

    def open_tile(self, path: str | Path) -> TileOpened:
        """Parse a tile file and register it under its authority.

        Raises TileLoadException if the file cannot be read or parsed; the
        store is left untouched in that case.
        """
        path = Path(path)
        content = self._reader.read(path)
        authority = authority_from_path(path)
        self._store.put(authority, content)
        logger.info(
            "Opened tile '%s' (%s): %d resources, %d blocks",
            authority,
            content.manifest.name,
            len(content.manifest.resources),
            len(content.index),
        )

        event = TileOpened(authority=authority, manifest=content.manifest, path=path)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Tile open listener failed for '%s'", authority)
        return event

    def get_manifest(self, authority: str) -> Manifest:
        tile = self._store.get(authority)
        if tile is None:
            raise TileNotLoadedException(f"tile not loaded: {authority}")
        return tile.manifest

    def resolve(self, authority: str, path: str) -> ResolvedResource:
        """Resolve a request path to its resource entry and block bytes."""
        tile = self._store.get(authority)
        if tile is None:
            raise TileNotLoadedException(f"tile not loaded: {authority}")

        path = normalize_request_path(path)
        match = find_resource(tile.manifest, path)
        if match is None:
            raise ResourceNotFoundException(f"no resource at {path}")
        matched_path, resource = match

        src = resource.src
        if src is None:
            raise ResourceMissingSrcException("resource missing src")

        body = self._block_reader.read(tile, src)
        return ResolvedResource(
            request_path=path,
            matched_path=matched_path,
            resource=resource,
            body=body,
        )
