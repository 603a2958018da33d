# tests/conftest.py

from __future__ import annotations

import csv
from datetime import UTC, datetime
from types import SimpleNamespace

import pytest
from fakes import MemoryStorage

from task_planner.core.state import AppState
from task_planner.tasks.task_store import TaskStore

# Wednesday; its Monday-to-Sunday week is 2024-05-06 .. 2024-05-12.
NOW = datetime(2024, 5, 8, 12, 0, tzinfo=UTC)


@pytest.fixture()
def small_field_limit():
    """Shrink the csv reader's per-field cap so a modest row cannot be read."""
    old = csv.field_size_limit(64)
    yield
    csv.field_size_limit(old)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def store(storage: MemoryStorage) -> TaskStore:
    return TaskStore(storage)


@pytest.fixture()
def state(store: TaskStore) -> AppState:
    """
    AppState wired with an in-memory storage.

    We use a SimpleNamespace rather than the real Settings to keep unit tests
    isolated from the environment and any local .env file.
    """
    settings = SimpleNamespace(app_name="planner", extended_fields=True)
    return AppState(settings=settings, store=store)
