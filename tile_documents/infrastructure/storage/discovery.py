"""Discovery of tile files from command-line arguments and configured paths."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TILE_EXTENSION = ".tile"


class TileDiscovery:
    """Expands a list of paths into the tile files to open at startup.

    Files are kept when they exist and carry the tile extension.
    Directories are scanned for tile files, recursively unless disabled.
    Anything else is skipped with a log message.
    """

    def __init__(self, extension: str = TILE_EXTENSION, recursive: bool = True) -> None:
        if not extension.startswith("."):
            extension = f".{extension}"
        self._extension = extension.lower()
        self._recursive = recursive

    def discover(self, paths: list[str | Path]) -> list[Path]:
        """Return tile files in argument order, without duplicates."""
        found: list[Path] = []
        seen: set[Path] = set()

        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                candidates = self._scan_dir(path)
            elif path.is_file():
                if not self._has_extension(path):
                    logger.debug("Skipping non-tile file: %s", path)
                    continue
                candidates = [path]
            else:
                logger.warning("Tile path does not exist: %s", path)
                continue

            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    found.append(candidate)

        return found

    def _has_extension(self, path: Path) -> bool:
        return path.suffix.lower() == self._extension

    def _scan_dir(self, dir_path: Path) -> list[Path]:
        pattern = f"*{self._extension}"
        try:
            matches = dir_path.rglob(pattern) if self._recursive else dir_path.glob(pattern)
            files = sorted(p for p in matches if p.is_file())
        except PermissionError:
            logger.warning("Permission denied while scanning %s", dir_path)
            return []
        if not files:
            logger.info("No tile files found in %s", dir_path)
        return files
