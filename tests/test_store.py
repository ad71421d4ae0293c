from __future__ import annotations

from pathlib import Path

import pytest

from utm_beacon.errors import StoreError
from utm_beacon.store import JsonFileStore, MemoryStore, open_store


def test_file_store_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "state" / "beacon.json"
    store = JsonFileStore(str(path))
    store.set_int("count", 2)
    store.set_string("entry0", "http://t.test/q?u=0")
    store.set_string("entry1", "http://t.test/q?u=1")
    store.delete_key("entry1")

    reopened = JsonFileStore(str(path))

    assert reopened.get_int("count") == 2
    assert reopened.get_string("entry0") == "http://t.test/q?u=0"
    assert not reopened.has_key("entry1")
    assert not (tmp_path / "state" / "beacon.json.tmp").exists()


def test_corrupt_file_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "beacon.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonFileStore(str(path))


def test_typed_reads_fall_back_on_mismatch() -> None:
    store = MemoryStore({"n": "text", "s": 3})

    assert store.get_int("n", -1) == -1
    assert store.get_string("s") is None
    assert store.get_int("missing", 9) == 9


def test_keys_filters_by_prefix() -> None:
    store = MemoryStore({"aLog0": "x", "aLog1": "y", "bLog0": "z"})

    assert store.keys("aLog") == ["aLog0", "aLog1"]


def test_open_store_selects_backend(tmp_path: Path) -> None:
    assert type(open_store(None)) is MemoryStore
    assert isinstance(open_store(str(tmp_path / "s.json")), JsonFileStore)
