# src/tasktally/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the clock and the undo countdown swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Any, Protocol

Clock = Callable[[], float]
# Returns "now" as epoch seconds (time.time-compatible).


class Timer(Protocol):
    """A started one-shot countdown."""

    def cancel(self) -> None: ...


class TimerFactory(Protocol):
    """
    Starts one-shot countdowns for the undo controller.

    `callback` is invoked once after `delay_seconds` unless the timer is cancelled first.
    The factory decides where it runs (thread, event loop, test harness).
    """

    def start(self, delay_seconds: float, callback: Callable[[], None]) -> Timer: ...


class TaskRepo(Protocol):
    """What the undo controller needs from the repository."""

    def index_of(self, task_id: str) -> int: ...
    def remove(self, task_id: str) -> Any: ...
    def restore(self, task: Any, index: int | None = None) -> Any: ...
