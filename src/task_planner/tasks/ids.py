# src/task_planner/tasks/ids.py

from __future__ import annotations

import uuid


def new_id() -> str:
    """Random UUID4 string, unique for the lifetime of any realistic dataset."""
    return str(uuid.uuid4())
