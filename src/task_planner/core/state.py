# src/task_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_filters import TaskView
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Settings object (task_planner.config.Settings or a test stand-in).
    settings: Any

    store: TaskStore
    view: TaskView = field(default_factory=TaskView)
