# tests/fakes.py

from __future__ import annotations

from task_planner.storage.base import StorageLoadError, StorageSaveError


class MemoryStorage:
    """
    In-memory TaskStorage used by store/sync tests.

    - keeps the last saved text
    - can be told to fail loads/saves to exercise error paths
    """

    def __init__(
        self,
        text: str | None = None,
        *,
        name: str = "memory",
        fail_load: bool = False,
        fail_save: bool = False,
    ) -> None:
        self.name = name
        self.text = text
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.saves: list[str] = []

    def load(self) -> str | None:
        if self.fail_load:
            raise StorageLoadError(self.name, "simulated load failure")
        return self.text

    def save(self, text: str) -> None:
        if self.fail_save:
            raise StorageSaveError(self.name, "simulated save failure")
        self.text = text
        self.saves.append(text)
