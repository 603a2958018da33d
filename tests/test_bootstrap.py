# tests/test_bootstrap.py

from __future__ import annotations

import os
from pathlib import Path

import pytest
from fakes import MemoryStorage

from task_planner.cli.bootstrap import build_storage, create_initial_state
from task_planner.config import Settings
from task_planner.connectors import console_connector
from task_planner.storage.blob import BlobStorage
from task_planner.storage.local import LocalFileStorage
from task_planner.storage.sheets import SheetsWebAppStorage
from task_planner.storage.synced import SyncedStorage
from task_planner.tasks.task_codec import Schema


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    for key in list(os.environ):
        if key.startswith("PLANNER_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("PLANNER_DATA_DIR", str(tmp_path / "data"))
    return tmp_path / "data"


def test_settings_defaults(clean_env: Path) -> None:
    s = Settings.from_env()

    assert s.app_name == "planner"
    assert s.log_level == "WARNING"
    assert s.data_dir == clean_env
    assert s.tasks_csv_path == clean_env / "tasks.csv"
    assert s.extended_fields is True
    assert s.sheets_url == ""
    assert not s.blob_config().enabled
    assert s.http_timeout_seconds == 10.0


def test_settings_read_env(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLANNER_EXTENDED_FIELDS", "no")
    monkeypatch.setenv("PLANNER_BLOB_USE_EMULATOR", "1")
    monkeypatch.setenv("PLANNER_BLOB_CONTAINER", "  ")
    monkeypatch.setenv("PLANNER_HTTP_TIMEOUT_SECONDS", "not-a-number")

    s = Settings.from_env()
    blob = s.blob_config()

    assert s.extended_fields is False
    assert blob.enabled
    assert blob.container == "tasks"
    assert s.http_timeout_seconds == 10.0


def test_local_only_storage(clean_env: Path) -> None:
    storage = build_storage(Settings.from_env())

    assert isinstance(storage, LocalFileStorage)
    assert storage.path == clean_env / "tasks.csv"


def test_remote_mirrors_are_wired_when_configured(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLANNER_SHEETS_URL", "https://script.example/exec")
    monkeypatch.setenv("PLANNER_BLOB_ACCOUNT", "acct")

    storage = build_storage(Settings.from_env())

    assert isinstance(storage, SyncedStorage)
    assert isinstance(storage.primary, LocalFileStorage)
    assert [type(m) for m in storage.mirrors] == [SheetsWebAppStorage, BlobStorage]
    storage.close()


def test_create_initial_state_uses_schema_setting(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLANNER_EXTENDED_FIELDS", "false")

    state = create_initial_state(settings=Settings.from_env(), storage=MemoryStorage())

    assert state.store.schema is Schema.BASELINE
    assert clean_env.is_dir()


def test_console_loop_runs_commands_and_bare_text(
    state, storage: MemoryStorage, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    lines = iter(["Buy milk", "", "/ls", "/quit", "/add never"])
    monkeypatch.setattr("builtins.input", lambda _prompt: next(lines))

    console_connector.run_console_loop(state)

    out = capsys.readouterr().out
    assert [t.title for t in state.store.tasks] == ["Buy milk"]
    assert "Added" in out
    assert "Total 1 | Done 0 | Pending 1 | 0%" in out


def test_console_loop_stops_on_eof(state, monkeypatch: pytest.MonkeyPatch) -> None:
    def _eof(_prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    console_connector.run_console_loop(state)
    assert state.store.tasks == []
