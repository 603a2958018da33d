# src/task_planner/tasks/task_filters.py

"""
Derived views over a task forest.

Every filter keeps the tree shape: a surviving task carries its own
subtasks, filtered with the same rule. Inputs are never mutated.

Date-range and status filters are plain per-node predicates, so they
commute. Search keeps a task when any descendant matches, which makes it
order-sensitive next to the other two; `apply_view` fixes the order
date -> search -> status.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, tzinfo
from enum import StrEnum

from .periods import (
    DateRange,
    Direction,
    PeriodUnit,
    is_current_period,
    navigate,
    parse_task_date,
    period_range,
)
from .task_models import Task


class StatusFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"


class ViewType(StrEnum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def filter_by_date_range(forest: list[Task], rng: DateRange) -> list[Task]:
    """Keep tasks created inside `rng` (inclusive). Missing/unparseable createdAt is excluded."""
    out: list[Task] = []
    for task in forest:
        created = parse_task_date(task.created_at, rng.start.tzinfo)
        if created is None or not rng.contains(created):
            continue
        out.append(replace(task, subtasks=filter_by_date_range(task.subtasks, rng)))
    return out


def _search(forest: list[Task], needle: str) -> list[Task]:
    out: list[Task] = []
    for task in forest:
        matching_subtasks = _search(task.subtasks, needle)
        if (
            needle in task.title.lower()
            or needle in (task.description or "").lower()
            or matching_subtasks
        ):
            out.append(replace(task, subtasks=matching_subtasks))
    return out


def filter_by_search(forest: list[Task], query: str | None) -> list[Task]:
    """
    Case-insensitive substring search over title and description.

    A task also survives if one of its descendants matches; non-matching
    subtasks are pruned either way.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(forest)
    return _search(forest, needle)


def filter_by_status(forest: list[Task], status: StatusFilter | str) -> list[Task]:
    status = StatusFilter(status)
    if status is StatusFilter.ALL:
        return list(forest)
    wanted = status is StatusFilter.COMPLETED

    def _keep(tasks: list[Task]) -> list[Task]:
        return [replace(t, subtasks=_keep(t.subtasks)) for t in tasks if t.completed == wanted]

    return _keep(forest)


# ---- view state ----


@dataclass(frozen=True, slots=True)
class TaskView:
    """What the user is looking at: period window, search query and status filter."""

    view_type: ViewType = ViewType.ALL
    current_date: date = field(default_factory=date.today)
    search: str = ""
    status: StatusFilter = StatusFilter.ALL


def view_range(view: TaskView, tz: tzinfo | None = None) -> DateRange | None:
    if view.view_type == ViewType.ALL:
        return None
    return period_range(view.current_date, PeriodUnit(str(view.view_type)), tz)


def apply_view(forest: list[Task], view: TaskView, tz: tzinfo | None = None) -> list[Task]:
    visible = list(forest)
    rng = view_range(view, tz)
    if rng is not None:
        visible = filter_by_date_range(visible, rng)
    visible = filter_by_search(visible, view.search)
    return filter_by_status(visible, view.status)


def shift_view(view: TaskView, direction: Direction | str) -> TaskView:
    """Move the window one period back/forward; a no-op for the 'all' view."""
    if view.view_type == ViewType.ALL:
        return view
    moved = navigate(view.current_date, direction, PeriodUnit(str(view.view_type)))
    if isinstance(moved, datetime):
        moved = moved.date()
    return replace(view, current_date=moved)


def is_current_view(view: TaskView, reference: date | datetime | None = None) -> bool:
    if view.view_type == ViewType.ALL:
        return True
    return is_current_period(view.current_date, PeriodUnit(str(view.view_type)), reference)
