"""
Filesystem path policy.

This module is the single choke point for determining where profilebook reads
and writes data.

- Runtime data lives under a profilebook "data root".
- The data root is resolved from an explicit override, then the environment,
  then the platform's per-user data directory.
- Nothing in the engine writes outside the resolved data root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ConfigurationError

APP_DIR_NAME: Final[str] = "profilebook"
DATA_ROOT_ENV: Final[str] = "PROFILEBOOK_DATA_ROOT"


@dataclass(frozen=True, slots=True)
class StorePaths:
    """
    Concrete resolved paths for a profilebook data root.

    Attributes
    ----------
    data_root:
        The root directory for all profilebook runtime data.
    store_root:
        Directory for the JSON-file key-value store (one file per key).
    sqlite_path:
        Database file for the SQLite key-value store.
    logs_root:
        Structured JSONL logs.
    settings_path:
        Persisted engine settings.
    """

    data_root: Path
    store_root: Path
    sqlite_path: Path
    logs_root: Path
    settings_path: Path


def default_data_root() -> Path:
    """
    Resolve the default profilebook data root.

    Preference order:
    1) %PROFILEBOOK_DATA_ROOT% if set
    2) %LOCALAPPDATA%\\profilebook
    3) %APPDATA%\\profilebook (Roaming)
    4) $XDG_DATA_HOME/profilebook
    5) ~/.local/share/profilebook
    """
    explicit = os.environ.get(DATA_ROOT_ENV)
    if explicit:
        return Path(explicit)

    local = os.environ.get("LOCALAPPDATA")
    if local:
        return Path(local) / APP_DIR_NAME

    roaming = os.environ.get("APPDATA")
    if roaming:
        return Path(roaming) / APP_DIR_NAME

    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / APP_DIR_NAME

    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigurationError("Cannot determine a home directory for the data root.") from exc
    return home / ".local" / "share" / APP_DIR_NAME


def resolve_store_paths(data_root: Path | None = None) -> StorePaths:
    """
    Resolve and return all filesystem paths under a data root.

    Parameters
    ----------
    data_root:
        Optional override for the profilebook data root.

    Returns
    -------
    StorePaths
        Resolved paths. Nothing is created.

    Raises
    ------
    ConfigurationError
        If the data root exists but is not a directory.
    """
    root = (data_root or default_data_root()).expanduser().resolve()
    if root.exists() and not root.is_dir():
        raise ConfigurationError(f"Data root is not a directory: {root}")

    return StorePaths(
        data_root=root,
        store_root=root / "store",
        sqlite_path=root / "store" / "records.sqlite",
        logs_root=root / "logs",
        settings_path=root / "settings.json",
    )


def ensure_store_directories(paths: StorePaths) -> None:
    """
    Create the directory structure for a data root if it does not already exist.

    Parameters
    ----------
    paths:
        Resolved store paths.

    Notes
    -----
    This function creates directories only. It performs no deletion.

    Raises
    ------
    ConfigurationError
        If a directory cannot be created (for example, a parent is a file).
    """
    for directory in (paths.data_root, paths.store_root, paths.logs_root):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"Cannot create directory {directory}: {exc}") from exc
