# src/tasktally/tasks/timers.py

"""
Timer factories for the undo countdown.

- ThreadTimerFactory: threading.Timer (daemon), used by the console shell
- AsyncioTimerFactory: loop.call_later, for hosts that already run an event loop
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


def _guarded(callback: Callable[[], None]) -> Callable[[], None]:
    # A crashing callback must not kill the timer thread / event loop silently.
    def run() -> None:
        try:
            callback()
        except Exception:
            logger.exception("Timer callback failed.")

    return run


class ThreadTimerFactory:
    def start(self, delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, float(delay_seconds)), _guarded(callback))
        timer.daemon = True
        timer.start()
        return timer


class AsyncioTimerFactory:
    """
    Schedule callbacks on an asyncio loop.

    If no loop is given, the running loop at start() time is used, so start()
    must then be called from inside that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def start(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, float(delay_seconds)), _guarded(callback))
