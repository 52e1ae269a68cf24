# src/tasktally/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Components take settings by injection; get_settings() is for the entrypoint.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .tasks.task_models import Priority, TaskStatus
from .tasks.undo_controller import DEFAULT_UNDO_TIMEOUT_MS

ENV_PREFIX = "TASKTALLY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Task defaults ----
    undo_timeout_ms: int
    default_priority: Priority
    default_status: TaskStatus

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasktally").strip() or "tasktally"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasktally"))

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        undo_timeout_ms = max(0, _env_int(_k("UNDO_TIMEOUT_MS"), DEFAULT_UNDO_TIMEOUT_MS))
        default_priority = Priority.parse(_env(_k("DEFAULT_PRIORITY"))) or Priority.MEDIUM
        default_status = TaskStatus.parse(_env(_k("DEFAULT_STATUS"))) or TaskStatus.TODO

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            console_enabled=console_enabled,
            undo_timeout_ms=undo_timeout_ms,
            default_priority=default_priority,
            default_status=default_status,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
