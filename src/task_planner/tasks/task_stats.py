# src/task_planner/tasks/task_stats.py

from __future__ import annotations

import math
from dataclasses import dataclass

from .task_models import Task, iter_tasks


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    completion_rate: int

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "completionRate": self.completion_rate,
        }


def task_stats(forest: list[Task]) -> TaskStats:
    """Counts tasks and subtasks at every depth."""
    total = 0
    completed = 0
    for task, _parent in iter_tasks(forest):
        total += 1
        if task.completed:
            completed += 1

    # Half-up rounding (12.5 -> 13), not Python's banker's rounding.
    rate = math.floor(100 * completed / total + 0.5) if total else 0
    return TaskStats(total=total, completed=completed, pending=total - completed, completion_rate=rate)
