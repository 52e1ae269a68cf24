# src/tasktally/core/errors.py

"""
Error types raised by the task core.

Only identity problems are errors:
- ValidationError: empty or duplicate title (user must fix the form)
- NotFoundError: unknown task id

Bad numerics are never errors; they are coerced to safe defaults.
"""

from __future__ import annotations

from typing import Any


class TaskTallyError(Exception):
    """Base class for all errors surfaced to callers of the core."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(TaskTallyError):
    """A submitted field violates a constraint the user has to fix."""

    EMPTY_TITLE = "empty_title"
    DUPLICATE_TITLE = "duplicate_title"

    def __init__(self, field: str, reason: str, message: str) -> None:
        super().__init__(message, details={"field": field, "reason": reason})
        self.field = field
        self.reason = reason


class NotFoundError(TaskTallyError):
    """Operation referenced a task id that is not in the live set."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found.", details={"task_id": task_id})
        self.task_id = task_id
