# src/tasktally/tasks/task_api.py

"""
Entry points for presentation collaborators (forms, dialogs, snackbars, console).

Each function maps one UI event onto the core:
- on_submit: add/edit form
- on_save: details dialog (revenue / time_taken / notes, optionally status)
- on_delete / on_undo / on_clear: delete notification
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ..core.state import AppState
from .task_models import Task
from .task_rules import cycle_time_days

logger = logging.getLogger(__name__)

__all__ = [
    "cycle_time_days",
    "describe_task",
    "on_clear",
    "on_delete",
    "on_save",
    "on_submit",
    "on_undo",
]


def on_submit(state: AppState, payload: Mapping[str, Any]) -> Task:
    """
    Create (no id) or edit (with id) from the form payload.

    Raises ValidationError for an empty/duplicate title, NotFoundError for an unknown id.
    """
    return state.repository.submit(payload)


def on_save(state: AppState, task_id: str, patch: Mapping[str, Any]) -> Task:
    return state.repository.patch(task_id, patch)


def on_delete(state: AppState, task_id: str) -> Task:
    return state.undo.stage_delete(task_id)


def on_undo(state: AppState) -> Task | None:
    return state.undo.undo()


def on_clear(state: AppState) -> Task | None:
    return state.undo.confirm_clear()


def _fmt_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def describe_task(task: Task) -> str:
    """One-line created/completed/cycle summary shown in the details view."""
    line = f"Created: {_fmt_ts(task.created_at)}"
    if task.completed_at is not None:
        days = cycle_time_days(task.created_at, task.completed_at)
        line += f" • Completed: {_fmt_ts(task.completed_at)} • Cycle: {days}d"
    return line
