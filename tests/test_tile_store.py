"""Tests for the thread-safe tile store."""

import threading

from tile_documents.domain.entities import Manifest, TileContent
from tile_documents.infrastructure.storage.tile_store import TileStore


def _tile(tmp_path, name: str) -> TileContent:
    return TileContent(path=tmp_path / f"{name}.tile", manifest=Manifest(name=name))


class TestTileStore:
    def test_put_and_get(self, tmp_path):
        store = TileStore()
        tile = _tile(tmp_path, "a")
        store.put("a", tile)
        assert store.get("a") is tile
        assert "a" in store
        assert len(store) == 1

    def test_missing(self):
        assert TileStore().get("nope") is None

    def test_overwrite_last_wins(self, tmp_path):
        store = TileStore()
        store.put("a", _tile(tmp_path, "first"))
        second = _tile(tmp_path, "second")
        store.put("a", second)
        assert store.get("a") is second
        assert len(store) == 1

    def test_authorities_sorted(self, tmp_path):
        store = TileStore()
        for name in ["c", "a", "b"]:
            store.put(name, _tile(tmp_path, name))
        assert store.authorities() == ["a", "b", "c"]

    def test_snapshot_is_a_copy(self, tmp_path):
        store = TileStore()
        store.put("a", _tile(tmp_path, "a"))
        snapshot = store.snapshot()
        store.put("b", _tile(tmp_path, "b"))
        assert list(snapshot) == ["a"]

    def test_concurrent_puts_and_gets(self, tmp_path):
        store = TileStore()
        errors = []

        def writer(index: int) -> None:
            for i in range(200):
                store.put(f"w{index}-{i % 10}", _tile(tmp_path, f"{index}-{i}"))

        def reader() -> None:
            for _ in range(500):
                for authority in store.authorities():
                    if store.get(authority) is None:
                        errors.append(authority)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store) == 40
