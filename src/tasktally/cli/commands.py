# src/tasktally/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import Any, cast

from ..core.errors import NotFoundError, TaskTallyError
from ..core.state import AppState
from ..tasks.task_api import (
    describe_task,
    on_clear,
    on_delete,
    on_save,
    on_submit,
    on_undo,
)
from ..tasks.task_models import Task, TaskStatus

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /add, ...)."""

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
        Handle a string like '/command args'.
        Returns a reply string or None if not a command.

        Core errors (validation, unknown id) become the reply text.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}."
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskTallyError as e:
            logger.debug("/%s rejected: %s", name, e.message)
            return f"Error: {e.message}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# Console keys -> payload keys.
_FIELD_ALIASES = {
    "time": "time_taken",
    "hours": "time_taken",
    "timetaken": "time_taken",
    "time_taken": "time_taken",
    "title": "title",
    "revenue": "revenue",
    "priority": "priority",
    "status": "status",
    "notes": "notes",
    "note": "notes",
}


def parse_fields(args: list[str]) -> tuple[dict[str, Any], list[str]]:
    """
    Split `key=value` tokens from free words.

    Unknown keys are kept as free words so they show up in the title
    rather than disappearing silently.
    """
    fields: dict[str, Any] = {}
    words: list[str] = []
    for token in args:
        key, sep, value = token.partition("=")
        field = _FIELD_ALIASES.get(key.strip().lower()) if sep else None
        if field is None:
            words.append(token)
            continue
        fields[field] = value
    return fields, words


def resolve_task(state: AppState, ref: str) -> Task:
    """Find a task by list number (1-based), full id or unique id prefix."""
    tasks = state.repository.list_tasks()
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(tasks):
            return tasks[n - 1]

    if ref in state.repository:
        return state.repository.get(ref)

    matches = [t for t in tasks if t.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise NotFoundError(ref)


def _fmt_num(value: float) -> str:
    return f"{value:g}"


def format_task_line(n: int, task: Task) -> str:
    return (
        f"{n}. [{task.id[:8]}] {task.title} | {task.status.value} | {task.priority.value} "
        f"| revenue {_fmt_num(task.revenue)} | {_fmt_num(task.time_taken)}h"
    )


def format_task_details(task: Task) -> str:
    lines = [
        task.title,
        f"  id: {task.id}",
        f"  {describe_task(task)}",
        f"  Revenue: {_fmt_num(task.revenue)} • Time Taken: {_fmt_num(task.time_taken)}h",
        f"  Priority: {task.priority.value} • Status: {task.status.value}",
    ]
    if task.notes:
        lines.append(f"  Notes: {task.notes}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    staged = state.undo.staged
    pending = f'"{staged.title}"' if staged is not None else "none"
    return (
        "Status:\n"
        f"  Live tasks: {state.repository.count()}\n"
        f"  Pending delete (undoable): {pending}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.repository.list_tasks()
    if not tasks:
        return "No tasks yet. Use /add to create one."
    return "\n".join(format_task_line(i, t) for i, t in enumerate(tasks, start=1))


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title="Write report" revenue=120 time=3 priority=High status=Todo notes="..."
    /add Write report        (free words become the title)
    """
    fields, words = parse_fields(args)
    if "title" not in fields:
        fields["title"] = " ".join(words)
    task = on_submit(state, fields)
    return f'Task added: "{task.title}" [{task.id[:8]}].'


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <ref> key=value ...  (form edit: title, revenue, time, priority, status, notes)"""
    if not args:
        return "Usage: /edit <n|id> key=value ..."
    task = resolve_task(state, args[0])
    fields, _ = parse_fields(args[1:])
    if not fields:
        return "Nothing to change. Keys: title, revenue, time, priority, status, notes."
    updated = on_submit(state, {"id": task.id, **fields})
    return f'Task updated: "{updated.title}".'


def cmd_set(state: AppState, args: list[str]) -> str:
    """/set <ref> revenue=.. time=.. notes=..  (details dialog save)"""
    if not args:
        return "Usage: /set <n|id> revenue=.. time=.. notes=.."
    task = resolve_task(state, args[0])
    fields, _ = parse_fields(args[1:])
    fields.pop("title", None)
    if not fields:
        return "Nothing to change. Keys: revenue, time, notes, status."
    updated = on_save(state, task.id, fields)
    return format_task_details(updated)


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|id>"
    task = resolve_task(state, args[0])
    updated = on_save(state, task.id, {"status": TaskStatus.DONE})
    return f'Task done: "{updated.title}". {describe_task(updated)}'


def cmd_show(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /show <n|id>"
    return format_task_details(resolve_task(state, args[0]))


def cmd_rm(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /rm <n|id>"
    task = resolve_task(state, args[0])
    previous = state.undo.staged
    on_delete(state, task.id)

    # Staging replaces the pending delete; that one is gone for good now.
    if previous is not None:
        notice = f'Delete of "{previous.title}" is now permanent.'
        if emit is not None:
            emit(notice)
        else:
            logger.warning(notice)

    seconds = getattr(state.settings, "undo_timeout_ms", 4000) / 1000.0
    return f'Task deleted: "{task.title}". Use /undo within {seconds:g}s to restore it.'


def cmd_undo(state: AppState, args: list[str]) -> str:
    task = on_undo(state)
    if task is None:
        return "Nothing to undo."
    reply = f'Task restored: "{task.title}".'
    if state.repository.title_clashes(task.id):
        reply += " Another task now uses the same title; rename one of them with /edit."
    return reply


def cmd_clear(state: AppState, args: list[str]) -> str:
    task = on_clear(state)
    if task is None:
        return "Nothing pending."
    return f'Task "{task.title}" deleted permanently.'


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show task count and pending delete.")
registry.register("list", cmd_list, help_text="List tasks.", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text='Add a task: /add title="..." revenue=.. time=.. priority=.. status=.. notes=..',
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n|id> key=value ...")
registry.register("set", cmd_set, help_text="Update details: /set <n|id> revenue=.. time=.. notes=..")
registry.register("done", cmd_done, help_text="Mark a task done: /done <n|id>.")
registry.register("show", cmd_show, help_text="Show task details and cycle time: /show <n|id>.")
registry.register("rm", cmd_rm, help_text="Delete a task (undoable for a few seconds).", aliases=["del"])
registry.register("undo", cmd_undo, help_text="Restore the last deleted task.")
registry.register("clear", cmd_clear, help_text="Make the pending delete permanent now.")
