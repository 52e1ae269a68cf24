# src/tasktally/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_repository import TaskRepository
from ..tasks.undo_controller import UndoController


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    repository: TaskRepository
    undo: UndoController
