"""Cancellable next-turn scheduling.

The locale controller defers its change notification to the next turn of
a scheduler so several synchronous ``set_locale`` calls produce a single
notification.

``AdaptiveScheduler`` is the default: it decides per call whether an
event loop is running.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, Optional

from intl_runtime.logging import get_module_logger

logger = get_module_logger()

Callback = Callable[[], None]


class ScheduledCall(ABC):
    """Handle to a callback that has not run yet."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    """Runs callbacks on a later turn."""

    @abstractmethod
    def schedule(self, callback: Callback) -> ScheduledCall:
        pass


class _LoopCall(ScheduledCall):
    def __init__(self, handle: asyncio.Handle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class EventLoopScheduler(Scheduler):
    """Schedules with ``loop.call_soon`` on an asyncio event loop.

    Args:
        loop: Loop to schedule on. Defaults to the loop running when
            ``schedule`` is called.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, callback: Callback) -> ScheduledCall:
        loop = self._loop or asyncio.get_running_loop()
        return _LoopCall(loop.call_soon(callback))


class _QueuedCall(ScheduledCall):
    def __init__(self, callback: Callback):
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Queues callbacks until ``run_pending()`` is called.

    Used where no event loop drives the process, and in tests.
    """

    def __init__(self) -> None:
        self._queue: Deque[_QueuedCall] = deque()

    @property
    def pending(self) -> int:
        return sum(1 for call in self._queue if not call.cancelled)

    def schedule(self, callback: Callback) -> ScheduledCall:
        call = _QueuedCall(callback)
        self._queue.append(call)
        return call

    def run_pending(self) -> int:
        """Run the callbacks queued so far, skipping cancelled ones.

        Callbacks scheduled while running wait for the next call.

        Returns:
            Number of callbacks run.
        """
        batch, self._queue = self._queue, deque()
        ran = 0
        for call in batch:
            if call.cancelled:
                continue
            call.callback()
            ran += 1
        return ran


class AdaptiveScheduler(Scheduler):
    """Picks the mechanism when each callback is scheduled.

    Inside a running event loop the callback goes to ``loop.call_soon``;
    otherwise it waits in a manual queue drained by ``run_pending()``. No
    loop is retained between calls, so a service built at import time works
    in whichever loop later drives it.
    """

    def __init__(self) -> None:
        self._manual = ManualScheduler()

    @property
    def pending(self) -> int:
        """Callbacks waiting in the manual queue."""
        return self._manual.pending

    def schedule(self, callback: Callback) -> ScheduledCall:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no_running_event_loop", scheduler="manual")
            return self._manual.schedule(callback)
        return _LoopCall(loop.call_soon(callback))

    def run_pending(self) -> int:
        return self._manual.run_pending()


def create_scheduler() -> Scheduler:
    """Default scheduler for a service: an AdaptiveScheduler."""
    return AdaptiveScheduler()
