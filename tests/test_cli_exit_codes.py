from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

import profile_engine.record_store.json_store as json_store_module
import profilebook.cli as cli_module
from kv_fakes import InMemoryKeyValueStore
from profile_engine.record_store.errors import StorageIOError
from profile_engine.record_store.service import RecordStore


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers() -> Iterator[None]:
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_profilebook", False):
            root.removeHandler(handler)
            handler.close()


def _cli(data_root: Path, *argv: str) -> int:
    command, *rest = argv
    return cli_module.main([command, "--data-root", str(data_root), *rest])


def test_cli_list_on_fresh_root_shows_default_record(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    rc = _cli(tmp_path, "list")
    out = capsys.readouterr().out
    assert rc == 0
    assert "* 0: John Doe" in out


def test_cli_create_list_edit_delete(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = _cli(
        tmp_path,
        "create",
        "--first-name",
        "Ada",
        "--last-name",
        "Lovelace",
        "--dob",
        "1815-12-10",
        "--no-picture",
    )
    assert rc == 0
    assert "Created 1: Ada Lovelace" in capsys.readouterr().out

    assert _cli(tmp_path, "list") == 0
    out = capsys.readouterr().out
    assert "0: John Doe" in out
    assert "1: Ada Lovelace" in out

    assert _cli(tmp_path, "edit", "--index", "1", "--nationality", "British") == 0
    assert "Updated 1: Ada Lovelace" in capsys.readouterr().out

    assert _cli(tmp_path, "show", "--index", "1") == 0
    out = capsys.readouterr().out
    assert "Picture: No Image" in out
    assert "Date of Birth: 1815-12-10" in out
    assert "Nationality: British" in out

    assert _cli(tmp_path, "delete", "--index", "0") == 0
    assert "Deleted: John Doe" in capsys.readouterr().out

    assert _cli(tmp_path, "list") == 0
    out = capsys.readouterr().out
    assert "John Doe" not in out
    assert "* 0: Ada Lovelace" in out


def test_cli_delete_last_record_leaves_empty_list(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _cli(tmp_path, "delete", "--index", "0") == 0
    capsys.readouterr()

    assert _cli(tmp_path, "list") == 0
    assert "No records." in capsys.readouterr().out


def test_cli_create_returns_2_on_validation_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    rc = _cli(tmp_path, "create", "--first-name", "", "--dob", "1/1/1990")
    out = capsys.readouterr().out
    assert rc == 2
    assert "ERROR: first_name: First name is required" in out
    assert "ERROR: date_of_birth:" in out
    assert not (tmp_path / "store" / "users.json").exists()


@pytest.mark.parametrize("command", ["show", "edit", "delete"])
def test_cli_returns_2_on_bad_index(
    tmp_path: Path, command: str, capsys: pytest.CaptureFixture[str]
) -> None:
    rc = _cli(tmp_path, command, "--index", "5")
    out = capsys.readouterr().out
    assert rc == 2
    assert "ERROR:" in out


def test_cli_returns_3_when_save_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _boom(path: Path, data: bytes) -> None:
        raise StorageIOError(f"disk full: {path}")

    monkeypatch.setattr(json_store_module, "write_bytes_atomic", _boom)

    rc = _cli(tmp_path, "create", "--first-name", "Ada")
    out = capsys.readouterr().out
    assert rc == 3
    assert "WARNING: saved copy may be stale:" in out
    assert "disk full" in out


def test_cli_sqlite_backend_persists(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _cli(tmp_path, "create", "--backend", "sqlite", "--first-name", "Grace") == 0
    capsys.readouterr()

    assert _cli(tmp_path, "list", "--backend", "sqlite") == 0
    out = capsys.readouterr().out
    assert "1: Grace Doe" in out
    assert (tmp_path / "store" / "records.sqlite").is_file()
    assert not (tmp_path / "store" / "users.json").exists()


def test_cli_init_prints_paths_when_requested(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = _cli(tmp_path, "init", "--backend", "sqlite", "--print-paths")
    out = capsys.readouterr().out
    assert rc == 0
    assert "settings_path:" in out
    assert '"backend": "sqlite"' in (tmp_path / "settings.json").read_text(encoding="utf-8")


def test_cli_returns_2_when_data_root_is_a_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x", encoding="utf-8")

    rc = _cli(not_a_dir, "list")
    assert rc == 2
    assert "ERROR:" in capsys.readouterr().out


@pytest.mark.parametrize("command", ["init", "list", "create"])
def test_cli_returns_2_when_data_root_parent_is_a_file(
    tmp_path: Path, command: str, capsys: pytest.CaptureFixture[str]
) -> None:
    blocker = tmp_path / "f"
    blocker.write_text("x", encoding="utf-8")

    rc = _cli(blocker / "sub", command)
    out = capsys.readouterr().out
    assert rc == 2
    assert "ERROR:" in out


def test_cli_show_without_selection_returns_2(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    class _UnloadedStore(RecordStore):
        async def initialize(self) -> None:
            return None

    monkeypatch.setattr(
        cli_module, "open_record_store", lambda _paths, _settings: _UnloadedStore(InMemoryKeyValueStore())
    )

    rc = _cli(tmp_path, "show")
    out = capsys.readouterr().out
    assert rc == 2
    assert "ERROR: No record is selected." in out
