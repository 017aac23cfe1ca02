"""
SQLite implementation of KeyValueStore.

This module owns the on-disk SQLite format for serialized record lists.

Threading
---------
sqlite3 connections are never shared across threads. Each load or save opens
its own short-lived connection inside the worker thread that runs it.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Final

from .api import KeyValueStore, StorageKey
from .errors import StorageIOError
from .schema import SCHEMA_V1

logger = logging.getLogger(__name__)

SCHEMA_VERSION: Final[str] = "1"


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class SqliteKeyValueStore(KeyValueStore):
    """
    SQLite-backed KeyValueStore.

    Parameters
    ----------
    db_path:
        Path to the SQLite database.

    Notes
    -----
    The database file is created if absent. The parent directory is created as
    needed.
    """

    db_path: Path

    def __post_init__(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as conn:
                conn.executescript(SCHEMA_V1)
                conn.execute(
                    "INSERT OR IGNORE INTO store_meta(key, value) VALUES('schema_version', ?)",
                    (SCHEMA_VERSION,),
                )
        except (OSError, sqlite3.Error) as exc:
            raise StorageIOError(f"Failed to open record database: {self.db_path} ({exc})") from exc

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    async def load(self, key: StorageKey) -> bytes | None:
        """See KeyValueStore.load."""
        return await asyncio.to_thread(self._load_sync, key)

    async def save(self, key: StorageKey, data: bytes) -> None:
        """See KeyValueStore.save."""
        await asyncio.to_thread(self._save_sync, key, data)
        logger.debug("Stored %d bytes under key %r in %s", len(data), key, self.db_path)

    def _load_sync(self, key: StorageKey) -> bytes | None:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT payload FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StorageIOError(f"Failed to load key {key!r}: {exc}") from exc
        if row is None:
            return None
        return bytes(row["payload"])

    def _save_sync(self, key: StorageKey, data: bytes) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO kv(key, payload, updated_at) VALUES(?, ?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET payload = excluded.payload, "
                    "updated_at = excluded.updated_at",
                    (key, sqlite3.Binary(data), _utc_stamp()),
                )
        except sqlite3.Error as exc:
            raise StorageIOError(f"Failed to save key {key!r}: {exc}") from exc
