# tests/test_console_connector.py

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tasktally.cli.bootstrap import create_initial_state
from tasktally.connectors.console_connector import announce_purge, run_console_loop
from tasktally.tasks.undo_controller import PurgeReason

from .fakes import FakeTimerFactory, ManualClock


def _feed(monkeypatch: pytest.MonkeyPatch, lines: list[str]) -> None:
    it: Iterator[str] = iter(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)


def test_console_loop_runs_commands_until_exit(state, monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["/add Plan week", "", "hello", "/rm 1", "/undo", "/exit", "/add never"])

    run_console_loop(state)

    out = capsys.readouterr().out
    assert 'Task added: "Plan week"' in out
    assert "Commands start with '/'" in out
    assert 'Task restored: "Plan week"' in out
    assert [t.title for t in state.repository.list_tasks()] == ["Plan week"]


def test_console_loop_stops_on_eof(state, monkeypatch, capsys) -> None:
    _feed(monkeypatch, ["/list"])
    run_console_loop(state)
    assert "No tasks yet" in capsys.readouterr().out


def test_announce_purge_only_reports_expiry(state, capsys) -> None:
    task = state.repository.create({"title": "Old draft"})

    announce_purge(task, PurgeReason.CLEARED)
    announce_purge(task, PurgeReason.REPLACED)
    assert capsys.readouterr().out == ""

    announce_purge(task, PurgeReason.EXPIRED)
    assert 'Undo window closed: "Old draft" deleted permanently.' in capsys.readouterr().out


def test_expired_undo_window_is_printed(settings, timers: FakeTimerFactory, clock: ManualClock, capsys) -> None:
    state = create_initial_state(settings=settings, timer_factory=timers, clock=clock, on_purge=announce_purge)
    task = state.repository.create({"title": "Scratch"})
    state.undo.stage_delete(task.id)

    timers.last.fire()

    assert '"Scratch" deleted permanently' in capsys.readouterr().out
    assert state.repository.count() == 0
