from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final

from .errors import ConfigurationError
from .paths import resolve_store_paths

logger = logging.getLogger(__name__)

BACKENDS: Final[frozenset[str]] = frozenset({"json", "sqlite"})
LOG_LEVELS: Final[frozenset[str]] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """
    Persisted engine settings.

    Notes
    -----
    These settings only control defaults. Command-line flags override them for
    a single invocation without rewriting the file.
    """

    backend: str  # "json" | "sqlite"
    storage_key: str
    log_level: str  # "DEBUG" | "INFO" | "WARNING" | "ERROR"

    @staticmethod
    def defaults() -> "EngineSettings":
        return EngineSettings(backend="json", storage_key="users", log_level="WARNING")


def _settings_path(data_root: Path | None) -> Path:
    return resolve_store_paths(data_root).settings_path


def load_settings(*, data_root: Path | None) -> EngineSettings:
    """
    Load engine settings from disk.

    Parameters
    ----------
    data_root:
        Data root. If None, the default data root is used.

    Returns
    -------
    EngineSettings
        Loaded settings. Missing or unreadable files yield defaults, and each
        invalid value falls back to its default individually.
    """
    defaults = EngineSettings.defaults()
    path = _settings_path(data_root)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return defaults
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return defaults

    if not isinstance(payload, dict):
        return defaults

    backend = payload.get("backend", defaults.backend)
    if backend not in BACKENDS:
        backend = defaults.backend

    storage_key = payload.get("storage_key", defaults.storage_key)
    if not isinstance(storage_key, str) or not storage_key.strip():
        storage_key = defaults.storage_key

    log_level = str(payload.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        log_level = defaults.log_level

    return EngineSettings(backend=str(backend), storage_key=storage_key.strip(), log_level=log_level)


def save_settings(*, data_root: Path | None, settings: EngineSettings) -> None:
    """
    Save engine settings to disk.

    Parameters
    ----------
    data_root:
        Data root. If None, the default data root is used.
    settings:
        Settings to persist.

    Raises
    ------
    ConfigurationError
        If the settings file cannot be written.
    """
    path = _settings_path(data_root)
    payload = {
        "backend": settings.backend,
        "storage_key": settings.storage_key,
        "log_level": settings.log_level,
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot write settings file {path}: {exc}") from exc


def with_overrides(
    settings: EngineSettings,
    *,
    backend: str | None = None,
    log_level: str | None = None,
) -> EngineSettings:
    """Return ``settings`` with any non-None override applied."""
    if backend is not None:
        settings = replace(settings, backend=backend)
    if log_level is not None:
        settings = replace(settings, log_level=log_level.upper())
    return settings
