# tests/test_undo_controller.py

from __future__ import annotations

import asyncio
import threading

import pytest

from tasktally.core.errors import NotFoundError
from tasktally.tasks.task_models import Task
from tasktally.tasks.task_repository import TaskRepository
from tasktally.tasks.timers import AsyncioTimerFactory, ThreadTimerFactory
from tasktally.tasks.undo_controller import PurgeReason, UndoController

from .fakes import FakeTimerFactory, PurgeRecorder


@pytest.fixture()
def undo(repo: TaskRepository, timers: FakeTimerFactory) -> UndoController:
    return UndoController(repo, timeout_ms=4000, timer_factory=timers)


def _seed(repo: TaskRepository, *titles: str) -> list[Task]:
    return [repo.create({"title": t, "revenue": 5, "time_taken": 2}) for t in titles]


def test_stage_then_undo_restores_unchanged(
    repo: TaskRepository, undo: UndoController, timers: FakeTimerFactory
) -> None:
    t1, t2 = _seed(repo, "T1", "T2")

    staged = undo.stage_delete(t1.id)
    assert staged == t1
    assert t1.id not in repo
    assert undo.staged == t1
    assert timers.last.delay_seconds == 4.0

    restored = undo.undo()
    assert restored == t1
    assert repo.get(t1.id) == t1
    assert [t.id for t in repo.list_tasks()] == [t1.id, t2.id]
    assert timers.last.cancelled
    assert undo.staged is None

    # Terminal: a second undo / clear is a no-op.
    assert undo.undo() is None
    assert undo.confirm_clear() is None
    assert t1.id in repo


def test_stage_then_clear_is_permanent(repo: TaskRepository, undo: UndoController, timers: FakeTimerFactory) -> None:
    (t1,) = _seed(repo, "T1")

    undo.stage_delete(t1.id)
    assert undo.confirm_clear() == t1
    assert timers.last.cancelled
    assert t1.id not in repo

    assert undo.undo() is None
    assert t1.id not in repo
    assert repo.count() == 0


def test_restaging_discards_previous(repo: TaskRepository, undo: UndoController, timers: FakeTimerFactory) -> None:
    t1, t2, t3 = _seed(repo, "T1", "T2", "T3")

    undo.stage_delete(t1.id)
    first_timer = timers.last
    undo.stage_delete(t2.id)

    # Prior countdown cancelled before its payload was dropped.
    assert first_timer.cancelled
    assert len(timers.pending()) == 1
    assert undo.staged == t2

    assert undo.undo() == t2
    assert t1.id not in repo
    assert [t.id for t in repo.list_tasks()] == [t2.id, t3.id]
    assert undo.undo() is None


def test_countdown_expiry_purges(repo: TaskRepository, timers: FakeTimerFactory) -> None:
    purged = PurgeRecorder()
    undo = UndoController(repo, timeout_ms=4000, timer_factory=timers, on_purge=purged)
    (t1,) = _seed(repo, "T1")

    undo.stage_delete(t1.id)
    timers.last.fire()

    assert purged.tasks == [t1]
    assert purged.reasons == [PurgeReason.EXPIRED]
    assert undo.staged is None
    assert undo.undo() is None
    assert t1.id not in repo


def test_purge_reasons_for_clear_and_replace(repo: TaskRepository, timers: FakeTimerFactory) -> None:
    purged = PurgeRecorder()
    undo = UndoController(repo, timeout_ms=4000, timer_factory=timers, on_purge=purged)
    t1, t2 = _seed(repo, "T1", "T2")

    undo.stage_delete(t1.id)
    undo.stage_delete(t2.id)
    undo.confirm_clear()

    assert purged.events == [(t1, PurgeReason.REPLACED), (t2, PurgeReason.CLEARED)]


def test_stale_timer_does_not_purge_newer_stage(repo: TaskRepository, timers: FakeTimerFactory) -> None:
    purged = PurgeRecorder()
    undo = UndoController(repo, timeout_ms=4000, timer_factory=timers, on_purge=purged)
    t1, t2 = _seed(repo, "T1", "T2")

    undo.stage_delete(t1.id)
    stale = timers.last
    undo.stage_delete(t2.id)
    assert purged.tasks == [t1]

    # Late delivery of the cancelled countdown must not touch T2.
    stale.fire()
    assert purged.tasks == [t1]
    assert undo.staged == t2
    assert undo.undo() == t2


def test_stale_timer_after_undo_is_noop(repo: TaskRepository, undo: UndoController, timers: FakeTimerFactory) -> None:
    (t1,) = _seed(repo, "T1")
    undo.stage_delete(t1.id)
    timer = timers.last
    undo.undo()

    timer.fire()
    assert t1.id in repo
    assert undo.staged is None


def test_stage_unknown_id_keeps_pending(repo: TaskRepository, undo: UndoController, timers: FakeTimerFactory) -> None:
    (t1,) = _seed(repo, "T1")
    undo.stage_delete(t1.id)

    with pytest.raises(NotFoundError):
        undo.stage_delete("missing")

    assert undo.staged == t1
    assert not timers.last.cancelled


def test_undo_restores_even_if_title_reused(repo: TaskRepository, undo: UndoController) -> None:
    (t1,) = _seed(repo, "Report")
    undo.stage_delete(t1.id)
    other = repo.create({"title": "report"})

    assert undo.undo() == t1
    assert repo.count() == 2
    assert repo.title_clashes(t1.id) == [other]
    assert repo.title_clashes(other.id) == [t1]


def test_shutdown_cancels_without_purging(repo: TaskRepository, timers: FakeTimerFactory) -> None:
    purged = PurgeRecorder()
    undo = UndoController(repo, timeout_ms=4000, timer_factory=timers, on_purge=purged)
    (t1,) = _seed(repo, "T1")
    undo.stage_delete(t1.id)

    undo.shutdown()
    assert timers.last.cancelled
    assert purged.events == []


def test_thread_timer_expires(repo: TaskRepository) -> None:
    done = threading.Event()
    purged: list[Task] = []

    def on_purge(task: Task, reason: PurgeReason) -> None:
        purged.append(task)
        done.set()

    undo = UndoController(repo, timeout_ms=10, timer_factory=ThreadTimerFactory(), on_purge=on_purge)
    (t1,) = _seed(repo, "T1")
    undo.stage_delete(t1.id)

    assert done.wait(timeout=5.0)
    assert purged == [t1]
    assert undo.undo() is None


@pytest.mark.asyncio
async def test_asyncio_timer_expires_and_undo_cancels(repo: TaskRepository) -> None:
    purged = PurgeRecorder()
    undo = UndoController(repo, timeout_ms=20, timer_factory=AsyncioTimerFactory(), on_purge=purged)
    t1, t2 = _seed(repo, "T1", "T2")

    undo.stage_delete(t1.id)
    assert undo.undo() == t1
    await asyncio.sleep(0.06)
    assert purged.events == []
    assert t1.id in repo

    undo.stage_delete(t2.id)
    await asyncio.sleep(0.06)
    assert purged.events == [(t2, PurgeReason.EXPIRED)]
    assert t2.id not in repo
