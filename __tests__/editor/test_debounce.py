"""Tests for schedulers and the Debouncer."""
import asyncio

import pytest
from chatcomposer.editor import AsyncioScheduler, Debouncer, ManualScheduler, default_scheduler


class TestManualScheduler:
    """Tests for the virtual clock."""

    def test_runs_due_timers_in_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(2, lambda: calls.append("late"))
        scheduler.call_later(1, lambda: calls.append("early"))
        assert scheduler.advance(1.5) == 1
        assert calls == ["early"]
        scheduler.advance(1)
        assert calls == ["early", "late"]
        assert scheduler.now == 2.5

    def test_cancelled_timers_do_not_run(self):
        scheduler = ManualScheduler()
        calls = []
        timer = scheduler.call_later(1, lambda: calls.append(1))
        timer.cancel()
        assert scheduler.pending == 0
        scheduler.advance(5)
        assert calls == []

    def test_cancelled_timers_are_dropped(self):
        scheduler = ManualScheduler()
        debouncer = Debouncer(lambda: None, 0.5, scheduler)
        for _ in range(1000):
            debouncer.trigger()
        assert len(scheduler._timers) == 1
        debouncer.flush()
        assert scheduler._timers == []


class TestDebouncer:
    """Tests for trigger/flush/cancel."""

    def make(self, delay=0.5):
        scheduler = ManualScheduler()
        calls = []
        return Debouncer(lambda: calls.append(scheduler.now), delay, scheduler), scheduler, calls

    def test_fires_after_quiet_window(self):
        debouncer, scheduler, calls = self.make()
        debouncer.trigger()
        scheduler.advance(0.25)
        assert calls == []
        scheduler.advance(0.25)
        assert calls == [0.5]
        assert not debouncer.pending

    def test_each_trigger_restarts_window(self):
        debouncer, scheduler, calls = self.make()
        debouncer.trigger()
        scheduler.advance(0.25)
        debouncer.trigger()
        scheduler.advance(0.25)
        assert calls == []
        scheduler.advance(0.25)
        assert calls == [0.75]

    def test_flush_fires_immediately_once(self):
        debouncer, scheduler, calls = self.make()
        debouncer.trigger()
        assert debouncer.flush()
        assert calls == [0.0]
        scheduler.advance(1)
        assert len(calls) == 1

    def test_flush_without_pending_is_noop(self):
        debouncer, _, calls = self.make()
        assert not debouncer.flush()
        assert calls == []

    def test_cancel_drops_pending(self):
        debouncer, scheduler, calls = self.make()
        debouncer.trigger()
        assert debouncer.cancel()
        scheduler.advance(1)
        assert calls == []
        assert not debouncer.cancel()


class TestAsyncioScheduler:
    """Tests for running on an event loop."""

    def test_default_without_loop_is_manual(self):
        assert isinstance(default_scheduler(), ManualScheduler)

    @pytest.mark.asyncio
    async def test_default_inside_loop_is_asyncio(self):
        assert isinstance(default_scheduler(), AsyncioScheduler)

    @pytest.mark.asyncio
    async def test_debouncer_fires_on_loop(self):
        fired = asyncio.Event()
        debouncer = Debouncer(fired.set, delay=0.01, scheduler=AsyncioScheduler())
        debouncer.trigger()
        debouncer.trigger()
        await asyncio.wait_for(fired.wait(), timeout=1)
        assert not debouncer.pending
