"""
Key-value persistence API.

This module defines the minimal persistence surface the record store is
allowed to call. The store must not depend on files, SQLite, or any other
storage detail; it speaks only in keys and opaque bytes.

Notes
-----
- Both operations are coroutines. Adapters backed by blocking I/O run that I/O
  off the event loop.
- Adapters impose their own timeouts, if any. The store imposes none.
"""

from __future__ import annotations

from typing import Protocol

StorageKey = str


class KeyValueStore(Protocol):
    """
    Durable key-value store for serialized record lists.

    Implementations are engine-owned. Each key maps to one opaque byte payload.
    """

    async def load(self, key: StorageKey) -> bytes | None:
        """
        Load the payload stored under a key.

        Parameters
        ----------
        key:
            Storage key to read.

        Returns
        -------
        bytes | None
            Stored payload, or None if nothing is stored under ``key``.

        Raises
        ------
        StorageIOError
            If the underlying storage cannot be read.
        """
        raise NotImplementedError

    async def save(self, key: StorageKey, data: bytes) -> None:
        """
        Persist a payload under a key, replacing any previous payload.

        Parameters
        ----------
        key:
            Storage key to write.
        data:
            Payload to store.

        Raises
        ------
        StorageIOError
            If the underlying storage cannot be written.
        """
        raise NotImplementedError
