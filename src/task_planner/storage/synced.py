# src/task_planner/storage/synced.py

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..core.ports import TaskStorage
from .base import StorageError

logger = logging.getLogger(__name__)


class SyncedStorage:
    """
    Local-first storage with best-effort remote mirrors.

    save():
    - the primary must succeed (its error propagates)
    - each mirror is tried afterwards; failures are logged, not raised
    load():
    - the primary wins whenever it has data
    - otherwise the first mirror that has data is used
    """

    name = "synced"

    def __init__(self, primary: TaskStorage, mirrors: Sequence[TaskStorage] = ()) -> None:
        self._primary = primary
        self._mirrors = list(mirrors)
        self.last_sync_errors: dict[str, str] = {}

    @property
    def primary(self) -> TaskStorage:
        return self._primary

    @property
    def mirrors(self) -> list[TaskStorage]:
        return list(self._mirrors)

    def close(self) -> None:
        for backend in (self._primary, *self._mirrors):
            close = getattr(backend, "close", None)
            if close is not None:
                close()

    def load(self) -> str | None:
        text = self._primary.load()
        if text is not None and text.strip():
            return text

        for mirror in self._mirrors:
            try:
                remote = mirror.load()
            except StorageError:
                logger.warning("Mirror %s failed to load; trying next.", mirror.name, exc_info=True)
                continue
            if remote is not None and remote.strip():
                logger.info("Local storage empty; pulled tasks from %s.", mirror.name)
                return remote
        return text

    def save(self, text: str) -> None:
        self._primary.save(text)

        self.last_sync_errors = {}
        for mirror in self._mirrors:
            try:
                mirror.save(text)
            except StorageError as e:
                self.last_sync_errors[mirror.name] = str(e)
                logger.warning("Sync to %s failed: %s", mirror.name, e)
