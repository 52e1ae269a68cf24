# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktally.cli.bootstrap import create_initial_state
from tasktally.core.state import AppState
from tasktally.tasks.task_models import Priority, TaskStatus
from tasktally.tasks.task_repository import TaskRepository

from .fakes import FakeTimerFactory, ManualClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="tasktally-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        console_enabled=False,
        undo_timeout_ms=4000,
        default_priority=Priority.MEDIUM,
        default_status=TaskStatus.TODO,
    )


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def timers() -> FakeTimerFactory:
    return FakeTimerFactory()


@pytest.fixture()
def repo(clock: ManualClock) -> TaskRepository:
    return TaskRepository(clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, timers: FakeTimerFactory, clock: ManualClock) -> AppState:
    """AppState wired with a manual clock and manually fired undo timers."""
    return create_initial_state(settings=settings, timer_factory=timers, clock=clock)
