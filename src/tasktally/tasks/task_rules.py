# src/tasktally/tasks/task_rules.py

"""
Validation and derivation helpers shared by the repository and the task API.

Policy (kept asymmetric on purpose):
- title is strict: empty or duplicate -> ValidationError
- numerics are lenient: anything unusable falls back to a safe default
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.errors import ValidationError
from .task_models import TaskStatus

SECONDS_PER_DAY = 86_400

DEFAULT_REVENUE = 0.0
DEFAULT_TIME_TAKEN = 1.0


# Form payloads may arrive with the UI's camelCase keys.
_KEY_ALIASES = {
    "timeTaken": "time_taken",
    "createdAt": "created_at",
    "completedAt": "completed_at",
}


def normalize_payload_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {_KEY_ALIASES.get(k, k): v for k, v in payload.items()}


def normalize_title(raw: object) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def title_key(title: str) -> str:
    return title.strip().lower()


def is_duplicate_title(title: str, existing_titles: Iterable[str]) -> bool:
    """True if `title` equals one of `existing_titles` (trimmed, case-insensitive)."""
    key = title_key(title)
    if not key:
        return False
    return any(title_key(t) == key for t in existing_titles)


def validate_title(raw: object, other_titles: Iterable[str]) -> str:
    """
    Return the trimmed title or raise ValidationError.

    `other_titles` must not contain the title of the task being edited,
    so renaming a task to its own title is always allowed.
    """
    title = normalize_title(raw)
    if not title:
        raise ValidationError("title", ValidationError.EMPTY_TITLE, "Title is required.")
    if is_duplicate_title(title, other_titles):
        raise ValidationError(
            "title",
            ValidationError.DUPLICATE_TITLE,
            f'Duplicate title not allowed: "{title}".',
        )
    return title


def as_finite_number(raw: object) -> float | None:
    """
    Best-effort numeric parse. Returns None for missing, non-numeric or non-finite input.

    Strings are accepted because form/console input arrives as text.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    elif not isinstance(raw, (int, float)):
        return None
    try:
        # Huge ints overflow float().
        val = float(raw)
    except (OverflowError, ValueError):
        return None
    return val if math.isfinite(val) else None


def coerce_revenue(raw: object, fallback: float = DEFAULT_REVENUE) -> float:
    """Finite and >= 0. Unusable input -> fallback, negatives clamp to 0."""
    val = as_finite_number(raw)
    if val is None:
        return fallback
    return max(0.0, val)


def coerce_time_taken(raw: object) -> float:
    """Finite and > 0, otherwise 1."""
    val = as_finite_number(raw)
    if val is None or val <= 0:
        return DEFAULT_TIME_TAKEN
    return val


def normalize_notes(raw: object) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def derive_completed_at(
    prev_status: TaskStatus | None,
    new_status: TaskStatus,
    prev_completed_at: float | None,
    now_ts: float,
) -> float | None:
    """
    Completion timestamp after a status change.

    - into DONE from anything else: now
    - DONE -> DONE: unchanged
    - anything else: cleared
    """
    if new_status != TaskStatus.DONE:
        return None
    if prev_status == TaskStatus.DONE:
        return prev_completed_at if prev_completed_at is not None else now_ts
    return now_ts


def cycle_time_days(created_at: float, completed_at: float | None) -> int | None:
    """Whole days between creation and completion; None while not completed."""
    if completed_at is None:
        return None
    return math.floor((completed_at - created_at) / SECONDS_PER_DAY)
