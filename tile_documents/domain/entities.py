"""Domain entities for loaded tiles and their manifests."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path

SRC_KEY = "src"
CONTENT_TYPE_KEY = "content-type"
RESERVED_KEYS = frozenset({SRC_KEY, CONTENT_TYPE_KEY})


class Resource(Mapping[str, str]):
    """Flat string map for one manifest resource.

    ``src`` holds the canonical CID string of the block with the body; every
    other entry is an HTTP header passed through verbatim.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Resource({self._entries!r})"

    @property
    def src(self) -> str | None:
        return self._entries.get(SRC_KEY)

    @property
    def content_type(self) -> str | None:
        return self._entries.get(CONTENT_TYPE_KEY)

    def headers(self) -> list[tuple[str, str]]:
        """Entries forwarded as response headers (everything but src and content-type)."""
        return [(k, v) for k, v in self._entries.items() if k not in RESERVED_KEYS]


@dataclass(frozen=True)
class Icon:
    src: str
    sizes: str = ""
    purpose: str = ""


@dataclass(frozen=True)
class Manifest:
    name: str
    resources: dict[str, Resource] = field(default_factory=dict)
    icons: list[Icon] = field(default_factory=list)
    description: str | None = None
    short_name: str | None = None
    theme_color: str | None = None
    background_color: str | None = None


@dataclass(frozen=True)
class TileContent:
    """A parsed tile: backing file, manifest and CID -> (offset, length) index.

    Block bodies stay on disk and are read on demand.
    """

    path: Path
    manifest: Manifest
    index: dict[str, tuple[int, int]] = field(default_factory=dict)


@dataclass(frozen=True)
class TileOpened:
    """Payload delivered to open listeners."""

    authority: str
    manifest: Manifest
    path: Path


@dataclass(frozen=True)
class ResolvedResource:
    request_path: str
    matched_path: str
    resource: Resource
    body: bytes

    def content_type(self, default: str) -> str:
        return self.resource.content_type or default
