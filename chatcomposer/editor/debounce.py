"""
Debounce - cancellable timers for emitting text to the host.

The editor never talks to an event loop directly. It schedules through a
Scheduler:
- AsyncioScheduler wraps a running asyncio loop
- ManualScheduler is a virtual clock advanced by hand (tests, or hosts
  that drive their own tick)

Debouncer keeps at most one pending emission: every trigger cancels and
reschedules it, flush() fires it right away, cancel() drops it.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(delay, callback)


class ManualTimer:

    def __init__(self, when: float, callback: Callable[[], None], scheduler: ManualScheduler | None = None):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self._scheduler = scheduler

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._scheduler is not None:
            self._scheduler._discard(self)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"ManualTimer(when={self.when}, {state})"


class ManualScheduler:
    """
    A virtual clock.

    Usage:
        scheduler = ManualScheduler()
        scheduler.call_later(0.5, emit)
        scheduler.advance(0.5)   # runs emit
    """

    def __init__(self):
        self.now = 0.0
        self._timers: list[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback, self)
        self._timers.append(timer)
        return timer

    def _discard(self, timer: ManualTimer) -> None:
        if timer in self._timers:
            self._timers.remove(timer)

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every timer that comes due.

        Returns:
            The number of callbacks run
        """
        deadline = self.now + seconds
        ran = 0
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= deadline]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self._timers.remove(timer)
            self.now = max(self.now, timer.when)
            timer.callback()
            ran += 1
        self.now = deadline
        self._timers = [t for t in self._timers if not t.cancelled]
        return ran


def default_scheduler() -> Scheduler:
    """The running asyncio loop if there is one, else a manual clock."""
    try:
        return AsyncioScheduler(asyncio.get_running_loop())
    except RuntimeError:
        logger.debug("no running event loop, emissions wait for a manual clock or flush()")
        return ManualScheduler()


class Debouncer:
    """
    Run a callback once input has been quiet for `delay` seconds.

    Args:
        callback: Called with no arguments when the window elapses
        delay: Quiescence window in seconds
        scheduler: Where timers live (see default_scheduler)
    """

    def __init__(self, callback: Callable[[], None], delay: float = 0.5, scheduler: Scheduler | None = None):
        self.callback = callback
        self.delay = delay
        self.scheduler = scheduler or default_scheduler()
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """Cancel any pending run and start the window again."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = self.scheduler.call_later(self.delay, self._fire)

    def flush(self) -> bool:
        """
        Run the pending callback now.

        Returns:
            True if a run was pending
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> bool:
        """Drop the pending run. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self) -> None:
        self._handle = None
        self.callback()
