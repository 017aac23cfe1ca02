"""
Record store service.

Owns the canonical in-memory list of profile records and the selected record,
and keeps the persisted copy in step with it.

Threading
---------
The store is a single logical actor. ``initialize``, ``commit_create``,
``commit_edit`` and ``delete_selected`` all read-modify-write the whole list,
so they run one at a time under a single ``asyncio.Lock`` held across the
persistence write.

Persistence policy
------------------
Memory is the immediate source of truth. A failed write raises
PersistenceError but does not roll back the in-memory change; every later
mutation rewrites the whole list, which catches storage up.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Final

from profile_engine.codec import decode_records, encode_records
from profile_engine.data_models import (
    ProfileRecord,
    builtin_default_record,
    new_record_id,
    selection_placeholder,
)
from profile_engine.errors import RecordCodecError
from profile_engine.validation import validate_record

from .api import KeyValueStore, StorageKey
from .errors import (
    NoSelectionError,
    NotFoundError,
    PersistenceError,
    StorageIOError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY: Final[StorageKey] = "users"


class RecordStore:
    """
    In-memory record list synchronized with a KeyValueStore.

    Parameters
    ----------
    kv_store:
        Persistence adapter.
    storage_key:
        Fixed key under which the full record list is stored.
    """

    def __init__(self, kv_store: KeyValueStore, storage_key: StorageKey = DEFAULT_STORAGE_KEY) -> None:
        self._kv = kv_store
        self._key = storage_key
        self._records: list[ProfileRecord] = []
        self._selected: ProfileRecord | None = None
        self._pending_write = False
        self._lock = asyncio.Lock()

    # ---------------- Read accessors ----------------

    @property
    def records(self) -> tuple[ProfileRecord, ...]:
        """Snapshot of the records in display order."""
        return tuple(self._records)

    @property
    def selected(self) -> ProfileRecord | None:
        """The selected record, which may be a transient placeholder."""
        return self._selected

    @property
    def storage_key(self) -> StorageKey:
        return self._key

    @property
    def pending_write(self) -> bool:
        """True if the last write failed and storage may be behind memory."""
        return self._pending_write

    # ---------------- Lifecycle ----------------

    async def initialize(self) -> None:
        """
        Load records from storage and select the first one.

        Absent, undecodable or unreadable payloads seed the store with the
        built-in default record. Load failures are logged, not raised.
        """
        async with self._lock:
            records = await self._load_records()
            self._records = records
            self._selected = records[0] if records else selection_placeholder()
            self._pending_write = False

    async def _load_records(self) -> list[ProfileRecord]:
        try:
            payload = await self._kv.load(self._key)
        except StorageIOError as exc:
            logger.warning("Could not load records under %r: %s", self._key, exc)
            return [builtin_default_record()]

        if payload is None:
            logger.info("No stored records under %r; seeding default record", self._key)
            return [builtin_default_record()]

        try:
            records = decode_records(payload)
        except RecordCodecError as exc:
            logger.warning("Stored records under %r are unreadable: %s", self._key, exc)
            return [builtin_default_record()]

        logger.debug(
            "Loaded %d records", len(records), extra={"storage_key": self._key, "record_count": len(records)}
        )
        return records

    # ---------------- Drafts ----------------

    def begin_create(self) -> ProfileRecord:
        """Return a fresh draft initialized to the built-in default values."""
        return builtin_default_record()

    def begin_edit(self, target: ProfileRecord) -> ProfileRecord:
        """Return a copy of ``target`` for editing. Store state is not changed."""
        return replace(target)

    # ---------------- Mutations ----------------

    async def commit_create(self, draft: ProfileRecord) -> ProfileRecord:
        """
        Validate ``draft`` and append it to the store.

        Parameters
        ----------
        draft:
            Candidate record.

        Returns
        -------
        ProfileRecord
            The stored record (carrying a fresh surrogate id), now selected.

        Raises
        ------
        ValidationError
            If the draft fails validation. Nothing is changed or written.
        PersistenceError
            If the write failed. The record stays in memory.
        """
        errors = validate_record(draft)
        if errors:
            raise ValidationError(errors)

        async with self._lock:
            record = replace(draft, record_id=new_record_id())
            self._records.append(record)
            self._selected = record
            logger.info("Created record %s", record.record_id)
            await self._persist(record)
        return record

    async def commit_edit(self, draft: ProfileRecord, target: ProfileRecord) -> ProfileRecord:
        """
        Validate ``draft`` and replace ``target`` with it in place.

        Parameters
        ----------
        draft:
            Edited copy of ``target``.
        target:
            Record currently in the store.

        Returns
        -------
        ProfileRecord
            The stored record (carrying ``target``'s surrogate id), now selected.

        Raises
        ------
        ValidationError
            If the draft fails validation. Nothing is changed or written.
        NotFoundError
            If ``target`` is no longer in the store.
        PersistenceError
            If the write failed. The edit stays in memory.
        """
        errors = validate_record(draft)
        if errors:
            raise ValidationError(errors)

        async with self._lock:
            index = self._index_of(target)
            record = replace(draft, record_id=target.record_id)
            self._records[index] = record
            self._selected = record
            logger.info("Edited record %s at position %d", record.record_id, index)
            await self._persist(record)
        return record

    async def delete_selected(self) -> ProfileRecord:
        """
        Remove the selected record.

        Selection falls back to the first remaining record, or to a transient
        placeholder that is not added to the list when the store becomes empty.

        Returns
        -------
        ProfileRecord
            The removed record.

        Raises
        ------
        NoSelectionError
            If nothing is selected.
        NotFoundError
            If the selection is not in the store (for example, the placeholder).
        PersistenceError
            If the write failed. The removal stays in memory.
        """
        async with self._lock:
            if self._selected is None:
                raise NoSelectionError("No record is selected.")
            index = self._index_of(self._selected)
            removed = self._records.pop(index)
            self._selected = self._records[0] if self._records else selection_placeholder()
            logger.info("Deleted record %s; %d remain", removed.record_id, len(self._records))
            await self._persist(removed)
        return removed

    # ---------------- Selection ----------------

    def select(self, target: ProfileRecord) -> None:
        """
        Select ``target``. Selection is never persisted.

        Raises
        ------
        NotFoundError
            If ``target`` is not in the store.
        """
        index = self._index_of(target)
        self._selected = self._records[index]

    def select_index(self, index: int) -> ProfileRecord:
        """Select and return the record at ``index`` (display order)."""
        if not 0 <= index < len(self._records):
            raise NotFoundError(f"No record at position {index} (store holds {len(self._records)}).")
        self._selected = self._records[index]
        return self._selected

    # ---------------- Internals ----------------

    def _index_of(self, target: ProfileRecord) -> int:
        for index, record in enumerate(self._records):
            if record.record_id == target.record_id:
                return index
        raise NotFoundError("Record is not in the store.")

    async def _persist(self, record: ProfileRecord) -> None:
        data = encode_records(self._records)
        try:
            await self._kv.save(self._key, data)
        except StorageIOError as exc:
            self._pending_write = True
            logger.warning(
                "Write failed; in-memory records are ahead of storage: %s",
                exc,
                extra={"storage_key": self._key, "record_count": len(self._records)},
            )
            raise PersistenceError(exc, record) from exc
        self._pending_write = False
