# src/task_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on this Protocol instead of concrete backends,
so local file / spreadsheet / blob storage stay swappable and tests can
use in-memory fakes.
"""

from typing import Protocol


class TaskStorage(Protocol):
    """
    Persists the serialized (CSV) task forest.

    - load() returns None when nothing has been stored yet
    - failures raise StorageLoadError / StorageSaveError
    """

    name: str

    def load(self) -> str | None: ...

    def save(self, text: str) -> None: ...
