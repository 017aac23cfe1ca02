from __future__ import annotations

import asyncio

import pytest

from kv_fakes import InMemoryKeyValueStore
from profile_engine.codec import decode_records
from profile_engine.data_models import ProfileRecord
from profile_engine.record_store.service import RecordStore


def _person(first: str) -> ProfileRecord:
    return ProfileRecord(first, "Tester", "2000-01-01", "Nowhere", "Test subject.")


@pytest.mark.asyncio
async def test_concurrent_commits_do_not_lose_updates() -> None:
    kv = InMemoryKeyValueStore(save_delay=0.01)
    store = RecordStore(kv)
    await store.initialize()

    await asyncio.gather(*(store.commit_create(_person(f"P{i}")) for i in range(5)))

    persisted = decode_records(kv.data["users"])
    assert len(store.records) == 6
    assert persisted == list(store.records)


@pytest.mark.asyncio
async def test_writes_are_issued_one_at_a_time_in_commit_order() -> None:
    kv = InMemoryKeyValueStore(save_delay=0.01)
    store = RecordStore(kv)
    await store.initialize()

    target = store.records[0]
    await asyncio.gather(
        store.commit_create(_person("A")),
        store.commit_edit(_person("B"), target),
        store.delete_selected(),
    )

    sizes = [len(decode_records(data)) for _key, data in kv.saves]
    assert sizes == [2, 2, 1]
    assert decode_records(kv.data["users"]) == list(store.records)
