# src/tasktally/tasks/task_repository.py

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from ..core.errors import NotFoundError
from ..core.ports import Clock
from .task_models import EDITABLE_FIELDS, Priority, Task, TaskStatus
from .task_rules import (
    as_finite_number,
    coerce_revenue,
    coerce_time_taken,
    derive_completed_at,
    normalize_notes,
    normalize_payload_keys,
    title_key,
    validate_title,
)

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


class TaskRepository:
    """
    In-memory authoritative set of live tasks.

    - create/patch/remove are the only mutations callers should use
    - restore is reserved for the undo controller
    - records are immutable; every change stores a new Task under the same id

    Not thread-safe by itself: callers run on one logical thread
    (the undo controller serializes its own timer callbacks).
    """

    def __init__(
        self,
        *,
        clock: Clock = time.time,
        id_factory: Callable[[], str] = _new_id,
        default_priority: Priority = Priority.MEDIUM,
        default_status: TaskStatus = TaskStatus.TODO,
    ) -> None:
        self._tasks: dict[str, Task] = {}
        self._clock = clock
        self._id_factory = id_factory
        self._default_priority = default_priority
        self._default_status = default_status

    # ---- queries ----

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def count(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(task_id)
        return task

    def list_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def titles(self) -> list[str]:
        return [t.title for t in self._tasks.values()]

    def index_of(self, task_id: str) -> int:
        for i, tid in enumerate(self._tasks):
            if tid == task_id:
                return i
        raise NotFoundError(task_id)

    def title_clashes(self, task_id: str) -> list[Task]:
        """Other live tasks whose title matches this task's (trimmed, case-insensitive)."""
        key = title_key(self.get(task_id).title)
        return [t for tid, t in self._tasks.items() if tid != task_id and title_key(t.title) == key]

    def _titles_except(self, task_id: str | None) -> list[str]:
        return [t.title for tid, t in self._tasks.items() if tid != task_id]

    # ---- mutations ----

    def create(self, payload: Mapping[str, Any]) -> Task:
        """
        Validate and insert a new task.

        Raises ValidationError for an empty/duplicate title. Numerics never raise:
        revenue falls back to 0, time_taken to 1. id/created_at/completed_at in the
        payload are ignored.
        """
        fields = normalize_payload_keys(payload)
        title = validate_title(fields.get("title"), self.titles())

        revenue = coerce_revenue(fields.get("revenue"))
        time_taken = coerce_time_taken(fields.get("time_taken"))
        self._log_coercion("revenue", fields.get("revenue"), revenue)
        self._log_coercion("time_taken", fields.get("time_taken"), time_taken)

        priority = Priority.parse(fields.get("priority")) or self._default_priority
        status = TaskStatus.parse(fields.get("status")) or self._default_status

        now_ts = self._clock()
        task = Task(
            id=self._id_factory(),
            title=title,
            revenue=revenue,
            time_taken=time_taken,
            priority=priority,
            status=status,
            created_at=now_ts,
            notes=normalize_notes(fields.get("notes")),
            completed_at=derive_completed_at(None, status, None, now_ts),
        )
        self._tasks[task.id] = task
        logger.info("Task created id=%s title=%r status=%s", task.id, task.title, task.status.value)
        return task

    def patch(self, task_id: str, partial: Mapping[str, Any]) -> Task:
        """
        Merge `partial` over the stored record, field by field.

        Omitted fields are untouched; id and created_at are write-once and ignored
        here. completed_at follows status transitions only.
        """
        current = self.get(task_id)
        fields = normalize_payload_keys(partial)

        ignored = sorted(k for k in fields if k not in EDITABLE_FIELDS)
        if ignored:
            logger.debug("Patch id=%s ignoring non-editable fields: %s", task_id, ", ".join(ignored))

        changes: dict[str, Any] = {}

        if "title" in fields:
            changes["title"] = validate_title(fields["title"], self._titles_except(task_id))

        if "revenue" in fields:
            changes["revenue"] = coerce_revenue(fields["revenue"], fallback=current.revenue)
            self._log_coercion("revenue", fields["revenue"], changes["revenue"])

        if "time_taken" in fields:
            changes["time_taken"] = coerce_time_taken(fields["time_taken"])
            self._log_coercion("time_taken", fields["time_taken"], changes["time_taken"])

        if "priority" in fields:
            priority = Priority.parse(fields["priority"])
            if priority is not None:
                changes["priority"] = priority

        if "status" in fields:
            status = TaskStatus.parse(fields["status"])
            if status is not None:
                changes["status"] = status
                changes["completed_at"] = derive_completed_at(
                    current.status, status, current.completed_at, self._clock()
                )

        if "notes" in fields:
            changes["notes"] = normalize_notes(fields["notes"])

        if not changes:
            return current

        updated = replace(current, **changes)
        self._tasks[task_id] = updated
        logger.info("Task patched id=%s fields=%s", task_id, ",".join(sorted(changes)))
        return updated

    def submit(self, payload: Mapping[str, Any]) -> Task:
        """Form path: payload with an id is an edit, without one a create."""
        fields = normalize_payload_keys(payload)
        task_id = fields.pop("id", None)
        if not task_id:
            return self.create(fields)
        return self.patch(str(task_id), fields)

    def remove(self, task_id: str) -> Task:
        task = self._tasks.pop(task_id, None)
        if task is None:
            raise NotFoundError(task_id)
        logger.info("Task removed id=%s title=%r", task_id, task.title)
        return task

    def restore(self, task: Task, index: int | None = None) -> Task:
        """
        Reinsert a previously removed record unchanged.

        `index` is the position it had in the live list; clamped to the current size.
        """
        if task.id in self._tasks:
            raise ValueError(f"Task {task.id} is already live")

        if any(title_key(t.title) == title_key(task.title) for t in self._tasks.values()):
            logger.warning("Restoring task id=%s whose title %r is now taken", task.id, task.title)

        items = list(self._tasks.items())
        pos = len(items) if index is None else max(0, min(int(index), len(items)))
        items.insert(pos, (task.id, task))
        self._tasks = dict(items)
        logger.info("Task restored id=%s title=%r", task.id, task.title)
        return task

    @staticmethod
    def _log_coercion(field: str, raw: object, value: float) -> None:
        if raw is None:
            return
        if as_finite_number(raw) != value:
            logger.warning("Coerced %s=%r to %s", field, raw, value)
