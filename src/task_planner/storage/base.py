# src/task_planner/storage/base.py

from __future__ import annotations


class StorageError(RuntimeError):
    """A storage backend could not complete a load or save."""

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(f"[{backend}] {message}")
        self.backend = backend


class StorageLoadError(StorageError):
    pass


class StorageSaveError(StorageError):
    pass
