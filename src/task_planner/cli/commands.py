# src/task_planner/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from typing import cast

from ..core.state import AppState
from ..tasks.periods import Direction, PeriodUnit, format_range
from ..tasks.task_filters import (
    StatusFilter,
    ViewType,
    apply_view,
    is_current_view,
    shift_view,
    view_range,
)
from ..tasks.task_models import Category, Priority, Task, iter_tasks
from ..tasks.task_stats import task_stats
from ..tasks.task_store import SAVE_FAILED

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

ID_PREFIX_LEN = 8


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _resolve(state: AppState, token: str) -> tuple[Task | None, str | None]:
    """Find a task by full id or unique id prefix. Returns (task, error_message)."""
    token = token.strip()
    if not token:
        return None, "Missing task id."
    matches = [t for t, _parent in iter_tasks(state.store.tasks) if t.id.startswith(token)]
    exact = [t for t in matches if t.id == token]
    if exact:
        return exact[0], None
    if not matches:
        return None, f"No task with id {token}."
    if len(matches) > 1:
        return None, f"Id prefix {token} is ambiguous ({len(matches)} tasks)."
    return matches[0], None


def _with_store_error(state: AppState, reply: str) -> str:
    error = state.store.error
    if not error:
        return reply
    if error == SAVE_FAILED:
        return f"{reply}\n[!] {error} (changes kept in memory; retry with /save)"
    return f"{reply}\n[!] {error}"


def _render_task(task: Task, depth: int, lines: list[str]) -> None:
    box = "[x]" if task.completed else "[ ]"
    meta = [str(task.category), str(task.priority)]
    if task.due_date:
        meta.append(f"due {task.due_date}")
    lines.append(f"{'    ' * depth}{box} {task.id[:ID_PREFIX_LEN]}  {task.title}  ({', '.join(meta)})")
    if task.description:
        lines.append(f"{'    ' * (depth + 1)}{task.description}")
    for sub in task.subtasks:
        _render_task(sub, depth + 1, lines)


def _view_title(state: AppState) -> str:
    view = state.view
    rng = view_range(view)
    if rng is None:
        title = "All tasks"
    else:
        label = format_range(rng, PeriodUnit(str(view.view_type)))
        current = " (current)" if is_current_view(view) else ""
        title = f"{str(view.view_type).capitalize()}: {label}{current}"
    extras = []
    if view.search:
        extras.append(f'search "{view.search}"')
    if view.status != StatusFilter.ALL:
        extras.append(str(view.status))
    return f"{title} [{'; '.join(extras)}]" if extras else title


def _stats_line(tasks: list[Task]) -> str:
    s = task_stats(tasks)
    return f"Total {s.total} | Done {s.completed} | Pending {s.pending} | {s.completion_rate}%"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title>                 -> new root task
    /add <title> | <description> -> with description
    """
    raw = " ".join(args)
    title, _sep, description = raw.partition("|")
    title = title.strip()
    if not title:
        return "Usage: /add <title> [| description]"
    task = state.store.add_task(title, description.strip())
    return _with_store_error(state, f"Added {task.id[:ID_PREFIX_LEN]}: {task.title}")


def cmd_sub(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /sub <parent-id> <title>"
    parent, err = _resolve(state, args[0])
    if parent is None:
        return err or "Unknown parent."
    if parent.parent_id is not None:
        return "Subtasks can only be added to top-level tasks."
    title = " ".join(args[1:]).strip()
    sub = state.store.add_subtask(parent.id, title)
    if sub is None:
        return f"Could not add a subtask to {args[0]}."
    return _with_store_error(state, f"Added subtask {sub.id[:ID_PREFIX_LEN]} under {parent.title}")


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task, err = _resolve(state, args[0])
    if task is None:
        return err or "Unknown task."
    updated = state.store.toggle_task(task.id)
    if updated is None:
        return f"No task with id {args[0]}."
    mark = "completed" if updated.completed else "reopened"
    return _with_store_error(state, f"{updated.title}: {mark}")


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /edit <id> <new title>"
    task, err = _resolve(state, args[0])
    if task is None:
        return err or "Unknown task."
    title = " ".join(args[1:]).strip()
    state.store.edit_task(task.id, {"title": title})
    return _with_store_error(state, f"Renamed {task.id[:ID_PREFIX_LEN]} to {title}")


_SET_FIELDS = {
    "title": "title",
    "description": "description",
    "desc": "description",
    "due": "due_date",
    "category": "category",
    "priority": "priority",
}


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set <id> title <text>
    /set <id> description <text>
    /set <id> due <YYYY-MM-DD | ->
    /set <id> category personal|work
    /set <id> priority low|medium|high
    """
    if len(args) < 3 or args[1].lower() not in _SET_FIELDS:
        return "Usage: /set <id> title|description|due|category|priority <value>"
    task, err = _resolve(state, args[0])
    if task is None:
        return err or "Unknown task."

    field_name = _SET_FIELDS[args[1].lower()]
    value = " ".join(args[2:]).strip()

    if field_name == "category":
        if value.lower() not in {c.value for c in Category}:
            return f"Category must be one of: {', '.join(c.value for c in Category)}"
        patch: dict[str, object] = {"category": Category(value.lower())}
    elif field_name == "priority":
        if value.lower() not in {p.value for p in Priority}:
            return f"Priority must be one of: {', '.join(p.value for p in Priority)}"
        patch = {"priority": Priority(value.lower())}
    elif field_name == "due_date":
        if value == "-":
            patch = {"due_date": None}
        else:
            try:
                date.fromisoformat(value)
            except ValueError:
                return "Due date must look like YYYY-MM-DD (or - to clear)."
            patch = {"due_date": value}
    else:
        patch = {field_name: value}

    state.store.edit_task(task.id, patch)
    return _with_store_error(state, f"Updated {args[1].lower()} of {task.id[:ID_PREFIX_LEN]}")


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    task, err = _resolve(state, args[0])
    if task is None:
        return err or "Unknown task."
    state.store.delete_task(task.id)
    extra = f" and {len(task.subtasks)} subtask(s)" if task.subtasks else ""
    return _with_store_error(state, f"Deleted {task.title}{extra}")


def cmd_list(state: AppState, args: list[str]) -> str:
    visible = apply_view(state.store.tasks, state.view)
    lines = [_view_title(state)]
    if not visible:
        lines.append("  (no tasks)")
    for task in visible:
        _render_task(task, 1, lines)
    lines.append(_stats_line(visible))
    return "\n".join(lines)


def cmd_view(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in {v.value for v in ViewType}:
        return "Usage: /view all|week|month|year"
    state.view = replace(state.view, view_type=ViewType(args[0].lower()))
    return cmd_list(state, [])


def _navigate(state: AppState, direction: Direction) -> str:
    if state.view.view_type == ViewType.ALL:
        return "Pick a period first: /view week|month|year"
    state.view = shift_view(state.view, direction)
    return cmd_list(state, [])


def cmd_prev(state: AppState, args: list[str]) -> str:
    return _navigate(state, Direction.PREV)


def cmd_next(state: AppState, args: list[str]) -> str:
    return _navigate(state, Direction.NEXT)


def cmd_today(state: AppState, args: list[str]) -> str:
    state.view = replace(state.view, current_date=date.today())
    return cmd_list(state, [])


def cmd_find(state: AppState, args: list[str]) -> str:
    """/find <query> filters by title/description; /find alone clears the search."""
    state.view = replace(state.view, search=" ".join(args).strip())
    return cmd_list(state, [])


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args or args[0].lower() not in {s.value for s in StatusFilter}:
        return "Usage: /show all|completed|pending"
    state.view = replace(state.view, status=StatusFilter(args[0].lower()))
    return cmd_list(state, [])


def cmd_stats(state: AppState, args: list[str]) -> str:
    visible = apply_view(state.store.tasks, state.view)
    return f"{_view_title(state)}\n{_stats_line(visible)}"


def cmd_save(state: AppState, args: list[str]) -> str:
    ok = state.store.save()
    return "Saved." if ok else _with_store_error(state, "Save failed.")


def cmd_reload(state: AppState, args: list[str]) -> str:
    tasks = state.store.load()
    if state.store.error:
        return f"[!] {state.store.error}"
    return f"Loaded {len(tasks)} top-level task(s)."


def cmd_export(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    if not args:
        return "Usage: /export <path.csv>"
    try:
        out = state.store.export_csv(" ".join(args))
    except OSError as e:
        logger.warning("Export failed: %s", e)
        return f"Export failed: {e}"
    return f"Exported to {out}"


def cmd_import(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    if not args:
        return "Usage: /import <path.csv>"
    if emit:
        emit("Importing... this replaces the current task list.")
    try:
        tasks = state.store.import_csv(" ".join(args))
    except (OSError, ValueError) as e:
        logger.warning("Import failed: %s", e)
        return f"Import failed: {e}"
    return _with_store_error(state, f"Imported {len(tasks)} top-level task(s).")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].")
registry.register("sub", cmd_sub, help_text="Add a subtask: /sub <parent-id> <title>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <id> <title>.")
registry.register(
    "set", cmd_set, help_text="Change a field: /set <id> title|description|due|category|priority <value>."
)
registry.register("rm", cmd_rm, help_text="Delete a task or subtask: /rm <id>.", aliases=["del"])
registry.register("list", cmd_list, help_text="Show tasks in the current view.", aliases=["ls"])
registry.register("view", cmd_view, help_text="Period view: /view all|week|month|year.")
registry.register("prev", cmd_prev, help_text="Previous period.")
registry.register("next", cmd_next, help_text="Next period.")
registry.register("today", cmd_today, help_text="Jump back to the current period.")
registry.register("find", cmd_find, help_text="Search titles/descriptions: /find <query> (empty clears).")
registry.register("show", cmd_show, help_text="Status filter: /show all|completed|pending.")
registry.register("stats", cmd_stats, help_text="Completion statistics for the current view.")
registry.register("save", cmd_save, help_text="Retry saving to storage.")
registry.register("reload", cmd_reload, help_text="Reload tasks from storage.")
registry.register("export", cmd_export, help_text="Export tasks: /export <path.csv>.")
registry.register("import", cmd_import, help_text="Import tasks (replaces current): /import <path.csv>.")
