# src/task_planner/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from ..core.ports import TaskStorage
from ..storage.base import StorageError
from . import task_models as tm
from .task_codec import Schema, decode_forest, detect_schema, forest_to_rows
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load tasks"
SAVE_FAILED = "Failed to save tasks"
LOAD_INCOMPLETE = "Stored tasks could not be fully read; saving is paused so they are not overwritten"


class TaskStore:
    """
    Holds the current task forest and persists it through a TaskStorage.

    - every operation swaps in a new forest snapshot (the old one is never mutated)
    - every mutation saves the whole forest
    - storage failures never escape: they are logged and surfaced via `error`,
      and the caller may retry by repeating the call (or calling save())
    - a failed load keeps the current forest; a partial read pauses saving
      until a complete load or import replaces it
    """

    def __init__(self, storage: TaskStorage, *, schema: Schema = Schema.EXTENDED) -> None:
        self._storage = storage
        self._schema = schema
        self._tasks: list[Task] = []
        self.error: str | None = None
        self._save_paused = False

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def schema(self) -> Schema:
        return self._schema

    def find(self, task_id: str) -> Task | None:
        return tm.find_task(self._tasks, task_id)

    def close(self) -> None:
        """Release backend resources (HTTP clients); a no-op for plain files."""
        close = getattr(self._storage, "close", None)
        if close is not None:
            close()

    # ---- persistence ----

    def load(self) -> list[Task]:
        try:
            text = self._storage.load()
        except StorageError:
            logger.exception("Loading tasks from %s failed.", self._storage.name)
            self.error = LOAD_FAILED
            return self.tasks

        decoded = decode_forest(text)
        self._tasks = decoded.tasks
        self._save_paused = not decoded.complete
        if self._save_paused:
            logger.error(
                "Tasks from %s are unreadable after line %s; not saving until reloaded or imported.",
                self._storage.name,
                decoded.stopped_at_line,
            )
            self.error = LOAD_INCOMPLETE
            return self.tasks
        self.error = None
        logger.info("Loaded %d root task(s) from %s.", len(self._tasks), self._storage.name)
        return self.tasks

    def save(self) -> bool:
        if self._save_paused:
            logger.warning("Save to %s skipped: stored data was only partly read.", self._storage.name)
            self.error = LOAD_INCOMPLETE
            return False
        text = forest_to_rows(self._tasks, self._schema)
        try:
            self._storage.save(text)
        except StorageError:
            logger.exception("Saving tasks to %s failed.", self._storage.name)
            self.error = SAVE_FAILED
            return False
        self.error = None
        return True

    def _commit(self, forest: list[Task]) -> None:
        self._tasks = forest
        self.save()

    # ---- CRUD ----

    def add_task(
        self,
        title: str,
        description: str = "",
        due_date: str | None = None,
        category: Category | str = Category.PERSONAL,
        priority: Priority | str = Priority.MEDIUM,
        *,
        now: datetime | None = None,
    ) -> Task:
        task = tm.create_task(
            title,
            description,
            due_date,
            None,
            category,
            priority,
            now=now,
        )
        self._commit(tm.add_task(self._tasks, task))
        return task

    def add_subtask(self, parent_id: str, title: str, *, now: datetime | None = None) -> Task | None:
        if self.find(parent_id) is None:
            return None
        forest = tm.add_subtask(self._tasks, parent_id, title, now=now)
        parent = tm.find_task(forest, parent_id)
        self._commit(forest)
        return parent.subtasks[-1] if parent is not None and parent.subtasks else None

    def edit_task(
        self,
        task_id: str,
        patch: Mapping[str, Any],
        *,
        now: datetime | None = None,
    ) -> Task | None:
        if self.find(task_id) is None:
            return None
        self._commit(tm.edit_task(self._tasks, task_id, patch, now=now))
        return self.find(task_id)

    def toggle_task(self, task_id: str, *, now: datetime | None = None) -> Task | None:
        if self.find(task_id) is None:
            return None
        self._commit(tm.toggle_task(self._tasks, task_id, now=now))
        return self.find(task_id)

    def delete_task(self, task_id: str) -> bool:
        if self.find(task_id) is None:
            return False
        self._commit(tm.remove_task(self._tasks, task_id))
        return True

    # ---- import / export ----

    def export_csv(self, path: str | Path) -> Path:
        """Write the full forest as a user-facing .csv file."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(forest_to_rows(self._tasks, self._schema), encoding="utf-8", newline="")
        logger.info("Exported tasks to %s", out)
        return out

    def import_csv(self, path: str | Path) -> list[Task]:
        """
        Replace the forest with the contents of a .csv export and persist it.

        Raises OSError if the file cannot be read and ValueError if it is
        malformed part-way; the current forest is kept in both cases.
        """
        src = Path(path)
        with src.open(encoding="utf-8", newline="") as f:
            text = f.read()
        header = text.lstrip("\ufeff").split("\n", 1)[0]
        logger.info(
            "Importing %s export from %s",
            detect_schema([h.strip() for h in header.split(",")]),
            src,
        )
        decoded = decode_forest(text)
        if not decoded.complete:
            raise ValueError(f"{src} is malformed near line {decoded.stopped_at_line}")
        self._save_paused = False
        self._commit(decoded.tasks)
        return self.tasks
