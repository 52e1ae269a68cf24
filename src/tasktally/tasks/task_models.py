# src/tasktally/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


def _lookup_key(raw: str) -> str:
    return raw.strip().lower().replace("_", " ").replace("-", " ")


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, raw: object) -> Priority | None:
        """Accept a member, its label or its name (any case). Unknown -> None."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = _lookup_key(raw)
        for member in cls:
            if key in (_lookup_key(member.value), _lookup_key(member.name)):
                return member
        return None


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Values are the user-facing labels. Only DONE carries a completion timestamp.
    """

    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def parse(cls, raw: object) -> TaskStatus | None:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or not raw.strip():
            return None
        key = _lookup_key(raw)
        for member in cls:
            if key in (_lookup_key(member.value), _lookup_key(member.name)):
                return member
        return None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    revenue: float
    time_taken: float
    priority: Priority
    status: TaskStatus
    created_at: float

    notes: str | None = None
    completed_at: float | None = None

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE


# Fields a patch may touch. id / created_at are write-once; completed_at is derived.
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "revenue", "time_taken", "priority", "status", "notes"}
)
