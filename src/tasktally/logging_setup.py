# src/tasktally/logging_setup.py

"""
Logging for the console app.

The REPL owns stdout, so:
- stderr gets short "[LEVEL] message" lines, project loggers only
  (third-party records only at ERROR+), at the configured console level
- <log_dir>/tasktally.log gets everything at DEBUG with full timestamps

With the default WARNING console level, lifecycle INFO lines stay in the file
while coercion / title-collision warnings still reach the user.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

PROJECT_LOGGER = "tasktally"
LOG_FILE_NAME = "tasktally.log"

_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_CONSOLE_FORMAT = "[%(levelname)s] %(message)s"


def is_project_record(record: logging.LogRecord) -> bool:
    return record.name == PROJECT_LOGGER or record.name.startswith(PROJECT_LOGGER + ".")


class _ProjectConsoleFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return is_project_record(record) or record.levelno >= logging.ERROR


def resolve_level(name: object, default: int = logging.WARNING) -> int:
    """'info' / 'DEBUG' / 20 -> logging level int; unknown -> default."""
    if isinstance(name, int) and not isinstance(name, bool):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handler.addFilter(_ProjectConsoleFilter())
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasktally",
    console_level: int | str = logging.WARNING,
    file_level: int | str = logging.DEBUG,
) -> Path:
    """
    Install the console and file handlers on the root logger (replacing any).

    Returns the log file path. Call once from the entrypoint.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    root.addHandler(_console_handler(resolve_level(console_level)))
    root.addHandler(_file_handler(log_file, resolve_level(file_level, logging.DEBUG)))

    logging.captureWarnings(True)
    return log_file
