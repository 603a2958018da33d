# src/task_planner/tasks/task_codec.py

"""
Task forest <-> CSV text.

Format:
- first row is the header; it also tells which schema an export uses
  (baseline: 8 columns, extended: + category, priority)
- one row per task in depth-first pre-order, parents before children
- parentId holds the id of the owning task (empty for root tasks)
- minimal quoting: a field is quoted only if it contains the separator,
  a quote or a line break; inner quotes are doubled

Decoding never raises on malformed-but-present data:
- missing trailing columns fall back to defaults
- a row whose parent was not seen earlier becomes a root task (orphan)
- broken quoting stops the read; decode_forest() reports the line
"""

from __future__ import annotations

import csv
import io
import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from .task_models import Category, Priority, Task, iter_tasks

logger = logging.getLogger(__name__)


def _raise_field_size_limit() -> int:
    # The reader rejects fields over 128 KiB by default; the writer has no cap.
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return limit
        except OverflowError:
            limit //= 2


FIELD_SIZE_LIMIT = _raise_field_size_limit()

BASELINE_COLUMNS: tuple[str, ...] = (
    "id",
    "title",
    "description",
    "completed",
    "createdAt",
    "updatedAt",
    "dueDate",
    "parentId",
)
EXTENDED_COLUMNS: tuple[str, ...] = (*BASELINE_COLUMNS, "category", "priority")


class Schema(StrEnum):
    BASELINE = "baseline"
    EXTENDED = "extended"

    @property
    def columns(self) -> tuple[str, ...]:
        return EXTENDED_COLUMNS if self is Schema.EXTENDED else BASELINE_COLUMNS


def detect_schema(header: Sequence[str]) -> Schema:
    names = {h.strip() for h in header}
    if {"category", "priority"} & names:
        return Schema.EXTENDED
    return Schema.BASELINE


def _task_row(task: Task, parent_id: str | None, schema: Schema) -> list[str]:
    row = [
        task.id,
        task.title,
        task.description or "",
        "true" if task.completed else "false",
        task.created_at or "",
        task.updated_at or "",
        task.due_date or "",
        parent_id or "",
    ]
    if schema is Schema.EXTENDED:
        row += [str(task.category), str(task.priority)]
    return row


def forest_to_rows(forest: list[Task], schema: Schema = Schema.EXTENDED) -> str:
    """Serialize a forest: header, then one row per task in pre-order."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(schema.columns)
    for task, parent_id in iter_tasks(forest):
        writer.writerow(_task_row(task, parent_id, schema))
    return buf.getvalue()


class _ColumnMap:
    """Resolves column values by header name, defaulting missing cells to ''."""

    def __init__(self, header: list[str]) -> None:
        names = [h.strip().lstrip("\ufeff") for h in header]
        self.schema = detect_schema(names)
        if "id" in names and "parentId" in names:
            self._index = {name: i for i, name in enumerate(names)}
        else:
            # Unknown header wording: fall back to the writer's column order.
            logger.warning("Unrecognised CSV header %r; using positional columns.", header)
            self._index = {name: i for i, name in enumerate(EXTENDED_COLUMNS)}

    def get(self, row: list[str], name: str) -> str:
        i = self._index.get(name)
        if i is None or i >= len(row):
            return ""
        return row[i]


def _row_to_task(row: list[str], cols: _ColumnMap) -> Task:
    return Task(
        id=cols.get(row, "id"),
        title=cols.get(row, "title"),
        description=cols.get(row, "description"),
        completed=cols.get(row, "completed").strip().lower() == "true",
        created_at=cols.get(row, "createdAt"),
        updated_at=cols.get(row, "updatedAt"),
        due_date=cols.get(row, "dueDate") or None,
        category=Category.parse(cols.get(row, "category")),
        priority=Priority.parse(cols.get(row, "priority")),
        parent_id=cols.get(row, "parentId") or None,
        subtasks=[],
    )


@dataclass(frozen=True, slots=True)
class DecodedForest:
    """
    Result of decoding CSV text.

    `stopped_at_line` is set when the reader gave up part-way (broken
    quoting, unreadable header); `tasks` then holds only the rows read
    before that point and must not be saved back over the source.
    """

    tasks: list[Task]
    stopped_at_line: int | None = None

    @property
    def complete(self) -> bool:
        return self.stopped_at_line is None


def decode_forest(text: str | None) -> DecodedForest:
    """
    Rebuild a forest from CSV text in a single pass over the rows.

    Rows are attached to a parent only if that parent's row came earlier;
    anything else lands at the root.
    """
    if not text or not text.strip():
        return DecodedForest(tasks=[])

    reader = csv.reader(io.StringIO(text))
    try:
        header = next(reader)
    except StopIteration:
        return DecodedForest(tasks=[])
    except csv.Error:
        logger.warning("Malformed CSV header; nothing decoded.")
        return DecodedForest(tasks=[], stopped_at_line=1)
    cols = _ColumnMap(header)
    logger.debug("Decoding %s CSV export.", cols.schema)

    by_id: dict[str, Task] = {}
    roots: list[Task] = []
    orphans = 0
    stopped_at: int | None = None

    try:
        for row in reader:
            if not row or all(not cell.strip() for cell in row):
                continue

            task = _row_to_task(row, cols)
            if task.id in by_id:
                logger.warning("Duplicate task id in CSV: %s", task.id)
            by_id[task.id] = task

            if task.parent_id is None:
                roots.append(task)
                continue

            parent = by_id.get(task.parent_id)
            if parent is not None and parent is not task:
                parent.subtasks.append(task)
            else:
                orphans += 1
                task.parent_id = None
                roots.append(task)
    except csv.Error as e:
        stopped_at = reader.line_num
        logger.warning("Malformed CSV near line %s (%s); remaining rows not read.", stopped_at, e)

    if orphans:
        logger.warning("Promoted %d orphan task(s) to root level.", orphans)
    return DecodedForest(tasks=roots, stopped_at_line=stopped_at)


def rows_to_forest(text: str | None) -> list[Task]:
    """Decoded tasks only; use decode_forest() to learn whether the read was complete."""
    return decode_forest(text).tasks
