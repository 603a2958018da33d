# src/task_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the local file plus any configured remote sync legs into one storage,
- builds AppState around a TaskStore.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import TaskStorage
from ..core.state import AppState
from ..storage.blob import BlobStorage
from ..storage.local import LocalFileStorage
from ..storage.sheets import SheetsWebAppStorage
from ..storage.synced import SyncedStorage
from ..tasks.task_codec import Schema
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_csv_path.parent.mkdir(parents=True, exist_ok=True)


def build_storage(settings) -> TaskStorage:
    """Local CSV file first; spreadsheet and blob mirrors only when configured."""
    schema = Schema.EXTENDED if settings.extended_fields else Schema.BASELINE
    local = LocalFileStorage(settings.tasks_csv_path)

    mirrors: list[TaskStorage] = []
    if settings.sheets_url:
        mirrors.append(
            SheetsWebAppStorage(
                settings.sheets_url,
                timeout=settings.http_timeout_seconds,
                schema=schema,
            )
        )
    blob_config = settings.blob_config()
    if blob_config.enabled:
        mirrors.append(BlobStorage(blob_config))

    if not mirrors:
        return local

    logger.info("Remote sync enabled: %s", ", ".join(m.name for m in mirrors))
    return SyncedStorage(local, mirrors)


def create_initial_state(*, settings=None, storage: TaskStorage | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings/storage injectable makes the app easier to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    schema = Schema.EXTENDED if settings.extended_fields else Schema.BASELINE
    store = TaskStore(storage if storage is not None else build_storage(settings), schema=schema)
    return AppState(settings=settings, store=store)
