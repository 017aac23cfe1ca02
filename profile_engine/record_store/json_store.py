"""
File-backed implementation of KeyValueStore.

Each key is stored as one ``<key>.json`` file under a store directory.

Design constraints
------------------
- Writes are atomic (temp file + replace) so a crash never leaves a torn payload.
- Keys are simple names; anything that could escape the store directory is rejected.
- Blocking file I/O runs in a worker thread via ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .api import KeyValueStore, StorageKey
from .errors import StorageIOError

logger = logging.getLogger(__name__)


def _validate_key(key: StorageKey) -> str:
    cleaned = key.strip()
    if not cleaned:
        raise StorageIOError("Storage key must not be empty.")
    if any(ch in cleaned for ch in r'\/:*?"<>|'):
        raise StorageIOError(f"Storage key contains invalid characters: {cleaned!r}")
    if cleaned.startswith("."):
        raise StorageIOError(f"Storage key must not start with '.': {cleaned!r}")
    return cleaned


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """
    Write bytes atomically to disk.

    Parameters
    ----------
    path:
        Destination file. Parent directories are created as needed.
    data:
        Payload to write.

    Raises
    ------
    StorageIOError
        If the payload cannot be written or moved into place.
    """
    path = path.expanduser()
    temp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with temp_path.open("wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
    except OSError as exc:
        try:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise StorageIOError(f"Failed to write {path} ({exc!s})") from exc


@dataclass(frozen=True, slots=True)
class JsonFileKeyValueStore(KeyValueStore):
    """
    Directory-backed KeyValueStore.

    Parameters
    ----------
    root:
        Directory holding one file per key. Created on first write.
    """

    root: Path

    def path_for(self, key: StorageKey) -> Path:
        """Return the file path that backs ``key``."""
        return self.root / f"{_validate_key(key)}.json"

    async def load(self, key: StorageKey) -> bytes | None:
        """See KeyValueStore.load."""
        path = self.path_for(key)
        return await asyncio.to_thread(self._read, path)

    async def save(self, key: StorageKey, data: bytes) -> None:
        """See KeyValueStore.save."""
        path = self.path_for(key)
        await asyncio.to_thread(write_bytes_atomic, path, data)
        logger.debug("Wrote %d bytes to %s", len(data), path)

    @staticmethod
    def _read(path: Path) -> bytes | None:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageIOError(f"Failed to read {path} ({exc!s})") from exc
