# src/tasktally/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL in the main thread.
Undo countdowns run on daemon timer threads; their expiry is announced on the console.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import announce_purge, run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        undo = getattr(state, "undo", None)
        if undo is not None:
            undo.shutdown()
    except Exception:
        logger.debug("Undo controller shutdown failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=getattr(settings, "data_dir", ".local/tasktally"),
        console_level=getattr(settings, "log_level", "WARNING"),
    )
    logger.info("Starting %s (log file %s)...", getattr(settings, "app_name", "tasktally"), log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(
        settings=settings,
        on_purge=announce_purge if settings.console_enabled else None,
    )

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            logger.warning("Console disabled; nothing to run.")
    finally:
        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
