# src/task_planner/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from .ids import new_id


class Category(StrEnum):
    PERSONAL = "personal"
    WORK = "work"

    @classmethod
    def parse(cls, raw: str | None) -> Category:
        if not raw:
            return cls.PERSONAL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.PERSONAL


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.MEDIUM


def now_iso(now: datetime | None = None) -> str:
    """UTC timestamp like 2024-05-01T09:30:00.000Z."""
    dt = now if now is not None else datetime.now(UTC)
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True)
class Task:
    """
    A task node.

    Ownership:
    - root tasks live in the forest list
    - a task with parent_id lives in its parent's `subtasks`

    Instances are treated as immutable: every operation in this module
    returns new objects instead of mutating.
    """

    id: str
    title: str
    created_at: str
    updated_at: str
    description: str = ""
    completed: bool = False
    due_date: str | None = None
    category: Category = Category.PERSONAL
    priority: Priority = Priority.MEDIUM
    parent_id: str | None = None
    subtasks: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON shape used by the spreadsheet web app (camelCase, nested)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "dueDate": self.due_date,
            "parentId": self.parent_id,
            "category": str(self.category),
            "priority": str(self.priority),
            "subtasks": [t.to_dict() for t in self.subtasks],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], parent_id: str | None = None) -> Task:
        task_id = str(data.get("id") or "")
        raw_subtasks = data.get("subtasks") or []
        completed = data.get("completed", False)
        if isinstance(completed, str):
            completed = completed.strip().lower() == "true"
        return cls(
            id=task_id,
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            completed=bool(completed),
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
            due_date=str(data["dueDate"]) if data.get("dueDate") else None,
            category=Category.parse(data.get("category")),
            priority=Priority.parse(data.get("priority")),
            parent_id=parent_id if parent_id is not None else (data.get("parentId") or None),
            subtasks=[
                cls.from_dict(sub, parent_id=task_id)
                for sub in raw_subtasks
                if isinstance(sub, Mapping)
            ],
        )


_PATCHABLE = frozenset(f.name for f in fields(Task)) - {"id"}


def create_task(
    title: str,
    description: str = "",
    due_date: str | None = None,
    parent_id: str | None = None,
    category: Category | str = Category.PERSONAL,
    priority: Priority | str = Priority.MEDIUM,
    *,
    now: datetime | None = None,
) -> Task:
    """
    Build a fresh task with a new id and both timestamps set to now.

    The title is taken as given; callers trim and validate it.
    """
    ts = now_iso(now)
    return Task(
        id=new_id(),
        title=title,
        description=description or "",
        completed=False,
        created_at=ts,
        updated_at=ts,
        due_date=due_date or None,
        category=Category.parse(str(category)),
        priority=Priority.parse(str(priority)),
        parent_id=parent_id,
        subtasks=[],
    )


def update_task(
    task: Task,
    patch: Mapping[str, Any] | None = None,
    *,
    now: datetime | None = None,
    **changes: Any,
) -> Task:
    """
    Return a copy of `task` with `patch` merged over it and updated_at refreshed.

    created_at survives unless the patch sets it explicitly (import/restore).
    """
    merged: dict[str, Any] = dict(patch or {})
    merged.update(changes)

    if "id" in merged:
        raise ValueError("task id is immutable")
    unknown = set(merged) - _PATCHABLE
    if unknown:
        raise ValueError(f"unknown task fields: {', '.join(sorted(unknown))}")

    if "subtasks" in merged:
        merged["subtasks"] = list(merged["subtasks"])
    # Every mutation refreshes updated_at, even if the patch carries one.
    merged["updated_at"] = now_iso(now)
    return replace(task, **merged)


def toggle_completion(task: Task, *, now: datetime | None = None) -> Task:
    """
    Flip `completed`.

    Completing a task also completes its immediate subtasks; reopening it
    leaves them as they are.
    """
    toggled = update_task(task, completed=not task.completed, now=now)
    if toggled.completed and toggled.subtasks:
        toggled = replace(
            toggled,
            subtasks=[update_task(sub, completed=True, now=now) for sub in toggled.subtasks],
        )
    return toggled


# ---- forest helpers ----


def iter_tasks(
    forest: list[Task], parent_id: str | None = None
) -> Iterator[tuple[Task, str | None]]:
    """Depth-first pre-order walk yielding (task, id of its parent or None)."""
    for task in forest:
        yield task, parent_id
        if task.subtasks:
            yield from iter_tasks(task.subtasks, task.id)


def find_task(forest: list[Task], task_id: str) -> Task | None:
    for task, _parent in iter_tasks(forest):
        if task.id == task_id:
            return task
    return None


def add_task(forest: list[Task], task: Task) -> list[Task]:
    return [*forest, task]


def add_subtask(
    forest: list[Task],
    parent_id: str,
    title: str,
    *,
    now: datetime | None = None,
) -> list[Task]:
    """Append a new subtask under `parent_id`; it inherits category and priority."""
    out: list[Task] = []
    for task in forest:
        if task.id == parent_id:
            sub = create_task(
                title,
                parent_id=parent_id,
                category=task.category,
                priority=task.priority,
                now=now,
            )
            out.append(update_task(task, subtasks=[*task.subtasks, sub], now=now))
        elif task.subtasks:
            out.append(replace(task, subtasks=add_subtask(task.subtasks, parent_id, title, now=now)))
        else:
            out.append(task)
    return out


def edit_task(
    forest: list[Task],
    task_id: str,
    patch: Mapping[str, Any],
    *,
    now: datetime | None = None,
) -> list[Task]:
    out: list[Task] = []
    for task in forest:
        if task.id == task_id:
            out.append(update_task(task, patch, now=now))
        elif task.subtasks:
            out.append(replace(task, subtasks=edit_task(task.subtasks, task_id, patch, now=now)))
        else:
            out.append(task)
    return out


def toggle_task(forest: list[Task], task_id: str, *, now: datetime | None = None) -> list[Task]:
    out: list[Task] = []
    for task in forest:
        if task.id == task_id:
            out.append(toggle_completion(task, now=now))
        elif task.subtasks:
            out.append(replace(task, subtasks=toggle_task(task.subtasks, task_id, now=now)))
        else:
            out.append(task)
    return out


def remove_task(forest: list[Task], task_id: str) -> list[Task]:
    """
    Drop the task with `task_id` (and its subtree) wherever it sits.

    The caller does not need to know the parent: every level is scanned.
    The input forest is left untouched.
    """
    out: list[Task] = []
    for task in forest:
        if task.id == task_id:
            continue
        if task.subtasks:
            task = replace(task, subtasks=remove_task(task.subtasks, task_id))
        out.append(task)
    return out
