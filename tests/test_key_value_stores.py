from __future__ import annotations

from pathlib import Path

import pytest

from profile_engine.codec import decode_records
from profile_engine.data_models import ProfileRecord
from profile_engine.record_store.errors import StorageIOError
from profile_engine.record_store.json_store import JsonFileKeyValueStore
from profile_engine.record_store.service import RecordStore
from profile_engine.record_store.sqlite_store import SqliteKeyValueStore


@pytest.mark.asyncio
async def test_json_store_roundtrip(tmp_path: Path) -> None:
    """Bytes saved under a key should round-trip exactly."""
    kv = JsonFileKeyValueStore(root=tmp_path / "store")

    assert await kv.load("users") is None
    await kv.save("users", b"[1, 2, 3]")

    assert await kv.load("users") == b"[1, 2, 3]"
    assert (tmp_path / "store" / "users.json").is_file()
    assert not (tmp_path / "store" / "users.json.tmp").exists()


@pytest.mark.asyncio
async def test_json_store_overwrites_previous_payload(tmp_path: Path) -> None:
    kv = JsonFileKeyValueStore(root=tmp_path)

    await kv.save("users", b"old")
    await kv.save("users", b"new")

    assert await kv.load("users") == b"new"


@pytest.mark.parametrize("key", ["", "  ", "../escape", "a/b", ".hidden", "c:drive"])
def test_json_store_rejects_unsafe_keys(tmp_path: Path, key: str) -> None:
    kv = JsonFileKeyValueStore(root=tmp_path)
    with pytest.raises(StorageIOError):
        kv.path_for(key)


@pytest.mark.asyncio
async def test_json_store_read_error_is_storage_error(tmp_path: Path) -> None:
    kv = JsonFileKeyValueStore(root=tmp_path)
    # A directory where the payload file should be cannot be read as bytes.
    (tmp_path / "users.json").mkdir()

    with pytest.raises(StorageIOError):
        await kv.load("users")


@pytest.mark.asyncio
async def test_sqlite_store_roundtrip(tmp_path: Path) -> None:
    kv = SqliteKeyValueStore(db_path=tmp_path / "db" / "records.sqlite")

    assert await kv.load("users") is None
    await kv.save("users", b"first")
    await kv.save("users", b"second")
    await kv.save("other", b"x")

    assert await kv.load("users") == b"second"
    assert await kv.load("other") == b"x"


@pytest.mark.asyncio
async def test_sqlite_store_reopens_existing_database(tmp_path: Path) -> None:
    db_path = tmp_path / "records.sqlite"
    await SqliteKeyValueStore(db_path=db_path).save("users", b"kept")

    assert await SqliteKeyValueStore(db_path=db_path).load("users") == b"kept"


@pytest.mark.asyncio
@pytest.mark.parametrize("backend", ["json", "sqlite"])
async def test_record_store_persists_across_instances(tmp_path: Path, backend: str) -> None:
    def _kv() -> JsonFileKeyValueStore | SqliteKeyValueStore:
        if backend == "json":
            return JsonFileKeyValueStore(root=tmp_path)
        return SqliteKeyValueStore(db_path=tmp_path / "records.sqlite")

    store = RecordStore(_kv())
    await store.initialize()
    await store.commit_create(
        ProfileRecord("Ada", "Lovelace", "1815-12-10", "British", "Mathematician.")
    )

    reopened = RecordStore(_kv())
    await reopened.initialize()

    assert reopened.records == store.records
    assert [r.record_id for r in reopened.records] == [r.record_id for r in store.records]
    raw = await _kv().load("users")
    assert raw is not None
    assert decode_records(raw) == list(store.records)
