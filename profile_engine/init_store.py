"""Data root initialization.

Creates the directory layout for a data root and writes default settings when
none exist yet. It can also render the resolved paths for display.

No file deletion is performed by this module.
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

from .paths import StorePaths, ensure_store_directories, resolve_store_paths
from .settings import EngineSettings, save_settings


def init_store(data_root: Path | None = None, settings: EngineSettings | None = None) -> StorePaths:
    """Initialize (create) the directory structure for a data root.

    Parameters
    ----------
    data_root:
        Optional override for the data root. If not provided, the default
        data root resolver is used.
    settings:
        Settings to write. If None, defaults are written only when no settings
        file exists yet.

    Returns
    -------
    StorePaths
        The resolved paths that were initialized.
    """
    paths = resolve_store_paths(data_root)
    ensure_store_directories(paths)
    if settings is not None or not paths.settings_path.exists():
        save_settings(data_root=paths.data_root, settings=settings or EngineSettings.defaults())
    return paths


def store_paths_as_text(paths: StorePaths) -> str:
    """Render StorePaths as a readable multi-line string.

    Parameters
    ----------
    paths:
        Store paths to render.

    Returns
    -------
    str
        Human-friendly string representation of the resolved paths.
    """
    items = asdict(paths)
    lines: list[str] = []
    for key in ("data_root", "store_root", "sqlite_path", "logs_root", "settings_path"):
        lines.append(f"{key}: {items[key]}")
    return "\n".join(lines)
