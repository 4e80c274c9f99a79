"""Debounce Scheduler - Imperative Shell.

Runs callbacks after a delay on a timer thread. The controller keeps a
single pending handle and cancels it whenever a newer change arrives.
"""

import logging
import threading
from typing import Callable, Protocol


logger = logging.getLogger(__name__)


class ScheduledTask(Protocol):
    """Handle to a callback that has not run yet."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        ...


class ThreadingScheduler:
    """Scheduler backed by threading.Timer.

    Timers are daemon threads so a pending recompute never keeps the
    process alive.
    """

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        """Run callback once after delay seconds.

        Args:
            delay: Delay in seconds
            callback: Zero-argument callable

        Returns:
            Timer handle; call cancel() to supersede it
        """
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        logger.debug("Scheduled callback in %.3fs", delay)
        return timer
