# tests/test_task_stats.py

from __future__ import annotations

from datetime import datetime

from task_planner.tasks.task_models import add_subtask, create_task, toggle_task
from task_planner.tasks.task_stats import TaskStats, task_stats


def test_empty_forest() -> None:
    assert task_stats([]) == TaskStats(total=0, completed=0, pending=0, completion_rate=0)


def test_one_of_three(now: datetime) -> None:
    a, b, c = (create_task(t, now=now) for t in "abc")
    forest = toggle_task([a, b, c], b.id, now=now)

    stats = task_stats(forest)

    assert (stats.total, stats.completed, stats.pending) == (3, 1, 2)
    assert stats.completion_rate == 33


def test_subtasks_are_counted(now: datetime) -> None:
    parent = create_task("parent", now=now)
    forest = add_subtask([parent], parent.id, "one", now=now)
    forest = add_subtask(forest, parent.id, "two", now=now)
    forest = toggle_task(forest, forest[0].subtasks[0].id, now=now)

    stats = task_stats(forest)

    assert (stats.total, stats.completed, stats.pending) == (3, 1, 2)


def test_rate_rounds_half_up(now: datetime) -> None:
    forest = [create_task(str(i), now=now) for i in range(8)]
    forest = toggle_task(forest, forest[0].id, now=now)

    # 12.5% -> 13
    assert task_stats(forest).completion_rate == 13


def test_as_dict_uses_camel_case(now: datetime) -> None:
    done = toggle_task([create_task("x", now=now)], "missing", now=now)
    assert task_stats(done).as_dict() == {
        "total": 1,
        "completed": 0,
        "pending": 1,
        "completionRate": 0,
    }
