# tests/test_task_models.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from task_planner.tasks.task_models import (
    Category,
    Priority,
    Task,
    add_subtask,
    create_task,
    edit_task,
    find_task,
    now_iso,
    remove_task,
    toggle_completion,
    toggle_task,
    update_task,
)


def _parent_with_two_subtasks(now: datetime) -> Task:
    parent = create_task("Plan trip", now=now)
    forest = add_subtask([parent], parent.id, "Book flights", now=now)
    forest = add_subtask(forest, parent.id, "Book hotel", now=now)
    return forest[0]


def test_create_task_defaults(now: datetime) -> None:
    task = create_task("Write report", now=now)

    assert task.title == "Write report"
    assert task.description == ""
    assert task.completed is False
    assert task.created_at == task.updated_at == "2024-05-08T12:00:00.000Z"
    assert task.due_date is None
    assert task.parent_id is None
    assert task.category is Category.PERSONAL
    assert task.priority is Priority.MEDIUM
    assert task.subtasks == []


def test_create_task_is_permissive_and_ids_are_unique() -> None:
    assert create_task("").title == ""
    ids = {create_task("t").id for _ in range(500)}
    assert len(ids) == 500


def test_create_task_accepts_string_labels(now: datetime) -> None:
    task = create_task("Deploy", category="work", priority="high", now=now)
    assert task.category is Category.WORK
    assert task.priority is Priority.HIGH


def test_update_task_is_pure_and_refreshes_updated_at(now: datetime) -> None:
    task = create_task("Old", now=now)
    later = now + timedelta(hours=1)

    updated = update_task(task, {"title": "New"}, now=later)

    assert task.title == "Old"
    assert task.updated_at == now_iso(now)
    assert updated.title == "New"
    assert updated.id == task.id
    assert updated.created_at == task.created_at
    assert updated.updated_at == now_iso(later)


def test_update_task_allows_explicit_created_at_override(now: datetime) -> None:
    task = create_task("Imported", now=now)
    updated = update_task(task, created_at="2020-01-01T00:00:00.000Z", now=now)
    assert updated.created_at == "2020-01-01T00:00:00.000Z"


def test_update_task_rejects_id_and_unknown_fields(now: datetime) -> None:
    task = create_task("x", now=now)
    with pytest.raises(ValueError):
        update_task(task, {"id": "other"})
    with pytest.raises(ValueError):
        update_task(task, {"colour": "red"})


def test_toggle_cascades_to_subtasks_only_when_completing(now: datetime) -> None:
    parent = _parent_with_two_subtasks(now)
    later = now + timedelta(minutes=5)

    done = toggle_completion(parent, now=later)
    assert done.completed is True
    assert [s.completed for s in done.subtasks] == [True, True]
    assert all(s.updated_at == now_iso(later) for s in done.subtasks)

    reopened = toggle_completion(done, now=later)
    assert reopened.completed is False
    assert [s.completed for s in reopened.subtasks] == [True, True]

    # input untouched
    assert parent.completed is False
    assert [s.completed for s in parent.subtasks] == [False, False]


def test_completing_a_subtask_leaves_parent_alone(now: datetime) -> None:
    parent = _parent_with_two_subtasks(now)
    sub_id = parent.subtasks[0].id

    forest = toggle_task([parent], sub_id, now=now)

    assert forest[0].completed is False
    assert forest[0].subtasks[0].completed is True
    assert forest[0].subtasks[1].completed is False


def test_add_subtask_inherits_labels_and_touches_parent(now: datetime) -> None:
    parent = create_task("Release", category=Category.WORK, priority=Priority.HIGH, now=now)
    later = now + timedelta(minutes=1)

    forest = add_subtask([parent], parent.id, "Tag version", now=later)

    sub = forest[0].subtasks[0]
    assert sub.parent_id == parent.id
    assert sub.category is Category.WORK
    assert sub.priority is Priority.HIGH
    assert forest[0].updated_at == now_iso(later)
    assert parent.subtasks == []


def test_add_subtask_unknown_parent_is_noop(now: datetime) -> None:
    task = create_task("Solo", now=now)
    assert add_subtask([task], "missing", "x", now=now) == [task]


def test_remove_subtask_without_knowing_parent(now: datetime) -> None:
    parent = _parent_with_two_subtasks(now)
    other = create_task("Other", now=now)
    forest = [parent, other]
    victim = parent.subtasks[0].id

    result = remove_task(forest, victim)

    assert [t.id for t in result] == [parent.id, other.id]
    assert [s.title for s in result[0].subtasks] == ["Book hotel"]
    assert find_task(result, victim) is None
    # input untouched
    assert len(forest[0].subtasks) == 2


def test_remove_root_drops_whole_subtree(now: datetime) -> None:
    parent = _parent_with_two_subtasks(now)
    other = create_task("Other", now=now)

    result = remove_task([parent, other], parent.id)

    assert result == [other]
    assert all(find_task(result, s.id) is None for s in parent.subtasks)


def test_edit_task_reaches_nested_tasks(now: datetime) -> None:
    parent = _parent_with_two_subtasks(now)
    sub_id = parent.subtasks[1].id

    forest = edit_task([parent], sub_id, {"title": "Book hostel"}, now=now)

    edited = find_task(forest, sub_id)
    assert edited is not None
    assert edited.title == "Book hostel"
    assert parent.subtasks[1].title == "Book hotel"


def test_dict_round_trip_keeps_nesting(now: datetime) -> None:
    parent = _parent_with_two_subtasks(now)
    parent = replace(parent, due_date="2024-05-20", description="summer")

    data = parent.to_dict()
    assert data["createdAt"] == parent.created_at
    assert data["subtasks"][0]["parentId"] == parent.id

    assert Task.from_dict(data) == parent


def test_from_dict_accepts_string_booleans() -> None:
    task = Task.from_dict({"id": "a", "title": "x", "completed": "true"})
    assert task.completed is True
    assert task.category is Category.PERSONAL
    assert task.priority is Priority.MEDIUM
