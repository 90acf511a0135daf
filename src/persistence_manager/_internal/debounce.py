"""Trailing-edge debouncer with an explicit flush."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class Debouncer:
    """Coalesce bursts of ``schedule()`` calls into one delayed call of *fn*.

    Each ``schedule()`` cancels the armed timer and starts a new one, so *fn*
    runs once, ``window`` seconds after the **last** call of a burst.

    ``flush()`` cancels the timer and runs *fn* right away.  It always runs
    *fn*, even when nothing was scheduled; callers that only want to write
    when dirty must guard inside *fn* themselves.

    *fn* may be a coroutine function.  Its coroutine is wrapped in a task and
    neither ``schedule()`` nor ``flush()`` waits for it; ``flush()`` hands the
    task back so a caller can await completion if it needs to.  Exceptions
    from timer-started effects are logged, since no caller sees them.

    Timers run on the event loop that is current at the first ``schedule()``.

    Parameters:
        fn:     Zero-argument effect, sync or async.
        window: Quiet period in seconds.
    """

    def __init__(self, fn: Callable[[], Any], window: float) -> None:
        self._fn = fn
        self.window = window
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> bool:
        """``True`` while a timer is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.window, self._fire)

    def flush(self) -> asyncio.Task[Any] | None:
        """Cancel the timer and invoke *fn* now.

        Returns the task running *fn* when it is async, else ``None``.
        """
        self._cancel_timer()
        return self._invoke()

    def _fire(self) -> None:
        self._handle = None
        logger.debug("Debounce window of %ss elapsed", self.window)
        task = self._invoke()
        if task is not None:
            # Nobody awaits a timer-started effect.
            task.add_done_callback(_log_failure)

    def _invoke(self) -> asyncio.Task[Any] | None:
        result = self._fn()
        if not inspect.isawaitable(result):
            return None
        task = asyncio.ensure_future(result)
        # Keep a strong reference until the effect settles.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


def _log_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Debounced call failed", exc_info=exc)
