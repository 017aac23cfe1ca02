from __future__ import annotations

from pathlib import Path

import pytest

from profile_engine.errors import ConfigurationError
from profile_engine.init_store import init_store, store_paths_as_text
from profile_engine.settings import EngineSettings, load_settings


def test_init_store_creates_expected_directories(tmp_path: Path) -> None:
    paths = init_store(data_root=tmp_path)

    assert paths.data_root.is_dir()
    assert paths.store_root.is_dir()
    assert paths.logs_root.is_dir()
    assert paths.settings_path.is_file()

    for directory in (paths.data_root, paths.store_root, paths.logs_root):
        assert tmp_path.resolve() in directory.parents or directory == tmp_path.resolve()


def test_init_store_writes_defaults_once(tmp_path: Path) -> None:
    custom = EngineSettings(backend="sqlite", storage_key="people", log_level="INFO")
    init_store(data_root=tmp_path, settings=custom)

    init_store(data_root=tmp_path)

    assert load_settings(data_root=tmp_path) == custom


def test_store_paths_as_text_lists_every_path(tmp_path: Path) -> None:
    paths = init_store(data_root=tmp_path)

    text = store_paths_as_text(paths)

    for key in ("data_root", "store_root", "sqlite_path", "logs_root", "settings_path"):
        assert f"{key}: " in text
    assert str(paths.sqlite_path) in text


def test_init_store_under_file_parent_raises_configuration_error(tmp_path: Path) -> None:
    blocker = tmp_path / "f"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        init_store(data_root=blocker / "sub")
