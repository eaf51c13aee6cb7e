"""Shared test fixtures for tile_documents tests."""

from __future__ import annotations

import base64
import hashlib
from pathlib import Path

import cbor2
import pytest

from tile_documents.domain.entities import Icon, Manifest, Resource, TileContent
from tile_documents.domain.services import TileService
from tile_documents.infrastructure.car.block_reader import BlockReader
from tile_documents.infrastructure.car.container_reader import CarContainerReader
from tile_documents.infrastructure.storage.tile_store import TileStore

RAW_CODEC = 0x55
SHA2_256 = 0x12


class TileBuilder:
    """Builds CARv1 tile files for tests."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @staticmethod
    def varint(value: int) -> bytes:
        out = bytearray()
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                out.append(byte | 0x80)
            else:
                out.append(byte)
                return bytes(out)

    def cid(self, payload: bytes, codec: int = RAW_CODEC) -> bytes:
        digest = hashlib.sha256(payload).digest()
        return b"\x01" + self.varint(codec) + bytes((SHA2_256, len(digest))) + digest

    @staticmethod
    def text(cid: bytes) -> str:
        return "b" + base64.b32encode(cid).decode("ascii").lower().rstrip("=")

    @staticmethod
    def link(cid: bytes) -> cbor2.CBORTag:
        return cbor2.CBORTag(42, b"\x00" + cid)

    def block(self, cid: bytes, payload: bytes) -> bytes:
        body = cid + payload
        return self.varint(len(body)) + body

    def build(self, header: object, blocks: list[bytes] | None = None) -> bytes:
        encoded = header if isinstance(header, bytes) else cbor2.dumps(header)
        return self.varint(len(encoded)) + encoded + b"".join(blocks or [])

    def write(self, name: str, data: bytes) -> Path:
        path = self.directory / name
        path.write_bytes(data)
        return path

    def site(self, name: str, files: dict[str, tuple[bytes, str]], **fields: object) -> Path:
        """Write a tile serving ``files`` (path -> (body, content type))."""
        resources = {}
        blocks = []
        for path, (body, content_type) in files.items():
            cid = self.cid(body)
            resources[path] = {"src": self.link(cid), "content-type": content_type}
            blocks.append(self.block(cid, body))
        header = {"version": 1, "roots": [], "name": name}
        header.update(fields)
        header["resources"] = resources
        return self.write(name, self.build(header, blocks))


@pytest.fixture
def tile_builder(tmp_path) -> TileBuilder:
    return TileBuilder(tmp_path)


@pytest.fixture
def tile_service() -> TileService:
    return TileService(TileStore(), CarContainerReader(), BlockReader())


@pytest.fixture
def sample_manifest() -> Manifest:
    return Manifest(
        name="Field Notes",
        resources={
            "/index.html": Resource({"src": "bafyindex", "content-type": "text/html"}),
            "/style.css": Resource({"src": "bafystyle", "content-type": "text/css"}),
            "/data.bin": Resource({"src": "bafydata"}),
        },
        icons=[Icon(src="/icon.png", sizes="192x192", purpose="any")],
        description="Notes from the field",
        short_name="Notes",
        theme_color="#112233",
    )


@pytest.fixture
def sample_tile(tmp_path, sample_manifest) -> TileContent:
    return TileContent(path=tmp_path / "notes.tile", manifest=sample_manifest)
