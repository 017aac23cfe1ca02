from __future__ import annotations

from dataclasses import replace

import pytest

from kv_fakes import InMemoryKeyValueStore
from profile_engine.codec import decode_records
from profile_engine.data_models import ProfileRecord, builtin_default_record, with_field
from profile_engine.record_store.errors import NotFoundError, PersistenceError, ValidationError
from profile_engine.record_store.service import RecordStore


def _ada() -> ProfileRecord:
    return ProfileRecord(
        first_name="Ada",
        last_name="Lovelace",
        date_of_birth="1815-12-10",
        nationality="British",
        short_bio="Mathematician.",
        picture=None,
    )


async def _store(kv: InMemoryKeyValueStore | None = None) -> tuple[RecordStore, InMemoryKeyValueStore]:
    kv = kv or InMemoryKeyValueStore()
    store = RecordStore(kv)
    await store.initialize()
    return store, kv


@pytest.mark.asyncio
async def test_begin_create_returns_default_template_without_mutating() -> None:
    store, kv = await _store()

    draft = store.begin_create()

    assert draft == builtin_default_record()
    assert draft.record_id != store.records[0].record_id
    assert len(store.records) == 1
    assert kv.saves == []


@pytest.mark.asyncio
async def test_commit_create_appends_selects_and_persists() -> None:
    store, kv = await _store()

    record = await store.commit_create(_ada())

    assert len(store.records) == 2
    assert store.records[1] == _ada()
    assert store.selected is record
    assert decode_records(kv.data["users"]) == list(store.records)


@pytest.mark.asyncio
async def test_commit_create_twice_with_same_draft_gives_distinct_records() -> None:
    store, _kv = await _store()
    draft = _ada()

    first = await store.commit_create(draft)
    second = await store.commit_create(draft)

    assert first.record_id != second.record_id
    assert len(store.records) == 3


@pytest.mark.asyncio
async def test_commit_create_with_empty_first_name_is_rejected_without_write() -> None:
    store, kv = await _store()
    before = store.records

    with pytest.raises(ValidationError) as excinfo:
        await store.commit_create(with_field(_ada(), "first_name", ""))

    assert excinfo.value.field_errors == {"first_name": "First name is required"}
    assert store.records == before
    assert kv.saves == []


@pytest.mark.asyncio
async def test_commit_edit_replaces_in_place_and_selects() -> None:
    store, kv = await _store()
    await store.commit_create(_ada())
    target = store.records[0]
    store.select(target)

    draft = with_field(store.begin_edit(target), "nationality", "Canadian")
    record = await store.commit_edit(draft, target)

    assert len(store.records) == 2
    assert store.records[0] == replace(target, nationality="Canadian")
    assert store.records[0].record_id == target.record_id
    assert store.records[1] == _ada()
    assert store.selected is record
    assert decode_records(kv.data["users"]) == list(store.records)


@pytest.mark.asyncio
async def test_begin_edit_does_not_mutate_store() -> None:
    store, kv = await _store()
    target = store.records[0]

    draft = with_field(store.begin_edit(target), "first_name", "Jane")

    assert draft.record_id == target.record_id
    assert store.records[0].first_name == "John"
    assert kv.saves == []


@pytest.mark.asyncio
async def test_commit_edit_of_missing_target_raises_not_found() -> None:
    store, kv = await _store()
    stranger = _ada()

    with pytest.raises(NotFoundError):
        await store.commit_edit(stranger, stranger)

    assert kv.saves == []


@pytest.mark.asyncio
async def test_commit_edit_validates_before_lookup() -> None:
    store, kv = await _store()
    target = store.records[0]

    with pytest.raises(ValidationError) as excinfo:
        await store.commit_edit(with_field(target, "date_of_birth", "01/01/1990"), target)

    assert set(excinfo.value.field_errors) == {"date_of_birth"}
    assert store.records[0].date_of_birth == "1990-01-01"
    assert kv.saves == []


@pytest.mark.asyncio
async def test_write_failure_keeps_in_memory_change() -> None:
    store, kv = await _store()
    kv.fail_saves = True

    with pytest.raises(PersistenceError) as excinfo:
        await store.commit_create(_ada())

    assert len(store.records) == 2
    assert store.selected == _ada()
    assert excinfo.value.record == _ada()
    assert store.pending_write is True
    assert "users" not in kv.data


@pytest.mark.asyncio
async def test_next_successful_write_catches_storage_up() -> None:
    store, kv = await _store()
    kv.fail_saves = True
    with pytest.raises(PersistenceError):
        await store.commit_create(_ada())

    kv.fail_saves = False
    await store.commit_create(replace(_ada(), first_name="Augusta"))

    assert store.pending_write is False
    assert decode_records(kv.data["users"]) == list(store.records)
    assert len(store.records) == 3
