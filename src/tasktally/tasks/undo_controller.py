# src/tasktally/tasks/undo_controller.py

from __future__ import annotations

"""
Undo controller.

A single-slot staging area for deletes:
- stage_delete() removes the task from the repository and starts a countdown,
- undo() puts it back unchanged,
- confirm_clear() (or countdown expiry) drops it for good.

Staging a new delete while one is pending purges the pending one first.
Only the most recently staged task is ever recoverable.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from ..core.ports import TaskRepo, Timer, TimerFactory
from .task_models import Task
from .timers import ThreadTimerFactory

logger = logging.getLogger(__name__)

DEFAULT_UNDO_TIMEOUT_MS = 4000


class PurgeReason(StrEnum):
    EXPIRED = "expired"
    REPLACED = "replaced"
    CLEARED = "cleared"


PurgeCallback = Callable[[Task, PurgeReason], None]


@dataclass(slots=True)
class StagedDelete:
    generation: int
    task: Task
    index: int
    timer: Timer | None = None


class UndoController:
    def __init__(
        self,
        repository: TaskRepo,
        *,
        timeout_ms: int = DEFAULT_UNDO_TIMEOUT_MS,
        timer_factory: TimerFactory | None = None,
        on_purge: PurgeCallback | None = None,
    ) -> None:
        self._repo = repository
        self._timeout_s = max(0, int(timeout_ms)) / 1000.0
        self._timers = timer_factory or ThreadTimerFactory()
        self._on_purge = on_purge

        # Timer callbacks may fire from another thread.
        self._lock = threading.RLock()
        self._slot: StagedDelete | None = None
        self._generation = 0

    @property
    def staged(self) -> Task | None:
        with self._lock:
            return self._slot.task if self._slot is not None else None

    @property
    def has_staged(self) -> bool:
        return self.staged is not None

    def stage_delete(self, task_id: str) -> Task:
        """
        Remove `task_id` from the live set and hold it for undo.

        Raises NotFoundError (from the repository) if the id is not live;
        in that case a pending staged task is left alone.
        """
        with self._lock:
            index = self._repo.index_of(task_id)
            task = self._repo.remove(task_id)

            # Cancel the old countdown before its payload is discarded.
            self._purge_slot(reason=PurgeReason.REPLACED)

            self._generation += 1
            entry = StagedDelete(generation=self._generation, task=task, index=index)
            self._slot = entry
            generation = entry.generation
            entry.timer = self._timers.start(self._timeout_s, lambda: self._expire(generation))

            logger.info(
                "Delete staged id=%s title=%r (undo window %.1fs)", task.id, task.title, self._timeout_s
            )
            return task

    def undo(self) -> Task | None:
        """Restore the staged task unchanged. No-op (None) if nothing is staged."""
        with self._lock:
            entry = self._slot
            if entry is None:
                logger.debug("Undo requested with nothing staged.")
                return None
            self._slot = None
            self._cancel_timer(entry)
            restored = self._repo.restore(entry.task, entry.index)
            logger.info("Delete undone id=%s", restored.id)
            return restored

    def confirm_clear(self) -> Task | None:
        """Drop the staged task permanently. No-op (None) if nothing is staged."""
        with self._lock:
            return self._purge_slot(reason=PurgeReason.CLEARED)

    def shutdown(self) -> None:
        """Cancel the pending countdown without purging (app exit)."""
        with self._lock:
            if self._slot is not None:
                self._cancel_timer(self._slot)
                logger.debug("Undo controller shut down with id=%s staged", self._slot.task.id)

    # ---- internals ----

    def _expire(self, generation: int) -> None:
        with self._lock:
            entry = self._slot
            if entry is None or entry.generation != generation:
                # Resolved or replaced since this countdown started.
                logger.debug("Stale undo timer generation=%s ignored", generation)
                return
            entry.timer = None
            self._purge_slot(reason=PurgeReason.EXPIRED)

    def _purge_slot(self, *, reason: PurgeReason) -> Task | None:
        entry = self._slot
        if entry is None:
            return None
        self._slot = None
        self._cancel_timer(entry)
        logger.info("Delete confirmed id=%s (%s)", entry.task.id, reason.value)
        if self._on_purge is not None:
            try:
                self._on_purge(entry.task, reason)
            except Exception:
                logger.exception("on_purge callback failed id=%s", entry.task.id)
        return entry.task

    @staticmethod
    def _cancel_timer(entry: StagedDelete) -> None:
        timer = entry.timer
        entry.timer = None
        if timer is not None:
            timer.cancel()
