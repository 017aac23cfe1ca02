"""Construction of the configured KeyValueStore backend."""

from __future__ import annotations

from profile_engine.errors import ConfigurationError
from profile_engine.paths import StorePaths, ensure_store_directories
from profile_engine.settings import EngineSettings

from .api import KeyValueStore
from .json_store import JsonFileKeyValueStore
from .service import RecordStore
from .sqlite_store import SqliteKeyValueStore


def open_key_value_store(paths: StorePaths, settings: EngineSettings) -> KeyValueStore:
    """
    Return the KeyValueStore selected by ``settings.backend``.

    Parameters
    ----------
    paths:
        Resolved data root paths. Directories are created as needed.
    settings:
        Engine settings naming the backend.

    Returns
    -------
    KeyValueStore
        Ready-to-use adapter.

    Raises
    ------
    ConfigurationError
        If the backend name is unknown.
    """
    ensure_store_directories(paths)
    if settings.backend == "json":
        return JsonFileKeyValueStore(root=paths.store_root)
    if settings.backend == "sqlite":
        return SqliteKeyValueStore(db_path=paths.sqlite_path)
    raise ConfigurationError(f"Unknown storage backend: {settings.backend!r}")


def open_record_store(paths: StorePaths, settings: EngineSettings) -> RecordStore:
    """
    Convenience constructor for a RecordStore over the configured backend.

    The returned store is not initialized; callers must ``await store.initialize()``.
    """
    return RecordStore(open_key_value_store(paths, settings), storage_key=settings.storage_key)
