"""Qt adapter for the engine RecordStore.

The engine owns persistence. The GUI talks to this adapter via signals/slots so
that storage I/O never blocks the UI thread and the GUI never sees storage details.

Threading model
--------------
- A single worker QObject lives on a dedicated QThread.
- The worker owns the RecordStore and a private asyncio event loop; every
  request runs to completion on that loop before the next queued request starts.
- The GUI communicates with the worker via queued Qt signals and receives a
  fresh StoreSnapshot after every completed request.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

from PySide6.QtCore import QObject, Qt, QThread, Signal, Slot

from profile_engine.data_models import ProfileRecord
from profile_engine.errors import ProfileEngineError
from profile_engine.paths import StorePaths
from profile_engine.record_store.backends import open_record_store
from profile_engine.record_store.errors import (
    NoSelectionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from profile_engine.record_store.service import RecordStore
from profile_engine.settings import EngineSettings


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Read-only view of store state handed to the GUI thread."""

    records: tuple[ProfileRecord, ...]
    selected: ProfileRecord | None
    pending_write: bool


class RecordStoreWorker(QObject):
    """Worker that owns the engine RecordStore and runs in a background thread."""

    state_changed = Signal(object)  # StoreSnapshot
    validation_failed = Signal(object)  # dict[str, str]
    not_saved = Signal(str)  # message
    error = Signal(str)  # message

    def __init__(self, paths: StorePaths, settings: EngineSettings) -> None:
        super().__init__()
        self._paths = paths
        self._settings = settings
        self._store: RecordStore | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _run(self, coro: Coroutine[Any, Any, Any]) -> Any:
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    def _snapshot(self) -> StoreSnapshot:
        assert self._store is not None
        return StoreSnapshot(
            records=self._store.records,
            selected=self._store.selected,
            pending_write=self._store.pending_write,
        )

    def _mutate(self, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            self._run(coro)
        except ValidationError as e:
            self.validation_failed.emit(e.field_errors)
            return
        except PersistenceError as e:
            self.state_changed.emit(self._snapshot())
            self.not_saved.emit(str(e))
            return
        except (NotFoundError, NoSelectionError) as e:
            self.error.emit(str(e))
            return
        self.state_changed.emit(self._snapshot())

    @Slot()
    def initialize(self) -> None:
        """Open the configured store, load records and emit the initial state."""
        try:
            if self._store is None:
                self._store = open_record_store(self._paths, self._settings)
            self._run(self._store.initialize())
        except ProfileEngineError as e:
            self.error.emit(str(e))
            return
        self.state_changed.emit(self._snapshot())

    @Slot(object)
    def commit_create(self, draft: object) -> None:
        """Commit a new record and emit the resulting state."""
        if self._store is None:
            self.error.emit("Record store is not initialized.")
            return
        assert isinstance(draft, ProfileRecord)
        self._mutate(self._store.commit_create(draft))

    @Slot(object, object)
    def commit_edit(self, draft: object, target: object) -> None:
        """Commit an edit of target and emit the resulting state."""
        if self._store is None:
            self.error.emit("Record store is not initialized.")
            return
        assert isinstance(draft, ProfileRecord) and isinstance(target, ProfileRecord)
        self._mutate(self._store.commit_edit(draft, target))

    @Slot()
    def delete_selected(self) -> None:
        """Delete the selected record and emit the resulting state."""
        if self._store is None:
            self.error.emit("Record store is not initialized.")
            return
        self._mutate(self._store.delete_selected())

    @Slot(object)
    def select(self, target: object) -> None:
        """Select target and emit the resulting state."""
        if self._store is None:
            self.error.emit("Record store is not initialized.")
            return
        assert isinstance(target, ProfileRecord)
        try:
            self._store.select(target)
        except NotFoundError as e:
            self.error.emit(str(e))
            return
        self.state_changed.emit(self._snapshot())

    def close_loop(self) -> None:
        """Release the event loop. Call only after the worker thread has stopped."""
        if self._loop is None:
            return
        try:
            self._loop.run_until_complete(self._loop.shutdown_default_executor())
        finally:
            self._loop.close()
            self._loop = None


class RecordStoreAdapter(QObject):
    """Qt adapter that marshals RecordStore calls onto a worker thread."""

    # Requests (GUI emits these; wired as queued connections to worker slots)
    request_initialize = Signal()
    request_commit_create = Signal(object)
    request_commit_edit = Signal(object, object)
    request_delete_selected = Signal()
    request_select = Signal(object)

    # Results (worker emits; adapter forwards)
    state_changed = Signal(object)  # StoreSnapshot
    validation_failed = Signal(object)  # dict[str, str]
    not_saved = Signal(str)  # message
    error = Signal(str)  # message

    def __init__(self, paths: StorePaths, settings: EngineSettings) -> None:
        super().__init__()

        self._thread = QThread()
        self._worker = RecordStoreWorker(paths=paths, settings=settings)
        self._worker.moveToThread(self._thread)

        # Queue requests onto worker thread.
        self.request_initialize.connect(
            self._worker.initialize, type=Qt.ConnectionType.QueuedConnection
        )
        self.request_commit_create.connect(
            self._worker.commit_create, type=Qt.ConnectionType.QueuedConnection
        )
        self.request_commit_edit.connect(
            self._worker.commit_edit, type=Qt.ConnectionType.QueuedConnection
        )
        self.request_delete_selected.connect(
            self._worker.delete_selected, type=Qt.ConnectionType.QueuedConnection
        )
        self.request_select.connect(self._worker.select, type=Qt.ConnectionType.QueuedConnection)

        # Forward results to GUI.
        self._worker.state_changed.connect(self.state_changed)
        self._worker.validation_failed.connect(self.validation_failed)
        self._worker.not_saved.connect(self.not_saved)
        self._worker.error.connect(self.error)

        self._thread.start()

    def shutdown(self) -> None:
        """Stop the worker thread cleanly."""
        self._thread.quit()
        self._thread.wait()
        self._worker.close_loop()
