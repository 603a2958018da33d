# src/task_planner/storage/local.py

from __future__ import annotations

import contextlib
import logging
import os
from pathlib import Path

from .base import StorageLoadError, StorageSaveError

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """
    Local-first CSV file.

    Writes go to a sibling .tmp file first and are swapped in with
    os.replace, so a crash mid-write leaves the previous file intact.
    """

    name = "local"

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        if not self._path.exists():
            logger.debug("No local task file at %s", self._path)
            return None
        try:
            with self._path.open(encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageLoadError(self.name, f"cannot read {self._path}: {e}") from e

    def save(self, text: str) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp.write_text(text, encoding="utf-8", newline="")
            os.replace(tmp, self._path)
        except OSError as e:
            raise StorageSaveError(self.name, f"cannot write {self._path}: {e}") from e

        with contextlib.suppress(OSError):
            # Task notes can be personal; keep the file private on disk.
            os.chmod(self._path, 0o600)
        logger.debug("Saved %d bytes to %s", len(text), self._path)
