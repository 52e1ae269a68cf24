# src/tasktally/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the repository and the undo controller into AppState.
"""

from __future__ import annotations

import logging
import time

from ..config import get_settings
from ..core.ports import Clock, TimerFactory
from ..core.state import AppState
from ..tasks.task_models import Priority, TaskStatus
from ..tasks.task_repository import TaskRepository
from ..tasks.undo_controller import DEFAULT_UNDO_TIMEOUT_MS, PurgeCallback, UndoController

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    timer_factory: TimerFactory | None = None,
    clock: Clock | None = None,
    on_purge: PurgeCallback | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the clock / timer factory) injectable makes the app easier
    to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    repository = TaskRepository(
        clock=clock or time.time,
        default_priority=getattr(settings, "default_priority", Priority.MEDIUM),
        default_status=getattr(settings, "default_status", TaskStatus.TODO),
    )
    undo = UndoController(
        repository,
        timeout_ms=getattr(settings, "undo_timeout_ms", DEFAULT_UNDO_TIMEOUT_MS),
        timer_factory=timer_factory,
        on_purge=on_purge,
    )
    logger.debug("AppState ready (undo window %sms)", getattr(settings, "undo_timeout_ms", None))
    return AppState(settings=settings, repository=repository, undo=undo)
