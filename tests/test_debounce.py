"""Tests for the cooperative timer queue and debouncer."""

import asyncio

from viewcore.debounce import Debouncer, TimerQueue


class TestTimerQueue:
    def test_runs_due_callbacks_in_order(self):
        timer = TimerQueue()
        calls = []
        timer.call_later(0.2, calls.append, "b")
        timer.call_later(0.1, calls.append, "a")
        timer.call_later(0.2, calls.append, "c")
        assert timer.advance(0.1) == 1
        assert calls == ["a"]
        assert timer.advance(0.1) == 2
        assert calls == ["a", "b", "c"]
        assert timer.time() == 0.2

    def test_cancelled_handles_are_skipped(self):
        timer = TimerQueue()
        calls = []
        handle = timer.call_later(0.1, calls.append, "x")
        assert timer.pending == 1
        handle.cancel()
        assert handle.cancelled()
        assert timer.pending == 0
        assert timer.advance(1) == 0
        assert calls == []


class TestDebouncer:
    def test_only_latest_value_is_applied(self):
        applied = []
        debouncer = Debouncer(applied.append, delay_ms=300)
        debouncer.schedule("fir")
        debouncer.timer.advance(0.2)
        debouncer.schedule("first")
        debouncer.timer.advance(0.2)
        assert applied == []
        assert debouncer.pending
        debouncer.timer.advance(0.15)
        assert applied == ["first"]
        assert not debouncer.pending

    def test_zero_or_negative_delay_is_immediate(self):
        applied = []
        debouncer = Debouncer(applied.append, delay_ms=0)
        debouncer.schedule("a")
        debouncer.schedule("b", delay_ms=-5)
        assert applied == ["a", "b"]
        assert not debouncer.pending

    def test_per_call_delay_override(self):
        applied = []
        debouncer = Debouncer(applied.append, delay_ms=300)
        debouncer.schedule("quick", delay_ms=50)
        debouncer.timer.advance(0.05)
        assert applied == ["quick"]

    def test_cancel_and_close_drop_pending_value(self):
        applied = []
        debouncer = Debouncer(applied.append, delay_ms=100)
        handle = debouncer.schedule("a")
        handle.cancel()
        assert not debouncer.pending
        debouncer.schedule("b")
        debouncer.close()
        debouncer.timer.advance(1)
        assert applied == []

    def test_works_with_asyncio_loop(self):
        applied = []

        async def scenario():
            debouncer = Debouncer(applied.append, delay_ms=10, timer=asyncio.get_running_loop())
            debouncer.schedule("x")
            debouncer.schedule("y")
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert applied == ["y"]


class TestCancelledPruning:
    def test_queue_stays_small_under_rapid_rescheduling(self):
        applied = []
        debouncer = Debouncer(applied.append, delay_ms=300)
        for i in range(1000):
            debouncer.schedule(i)
        assert len(debouncer.timer) <= 51
        assert debouncer.timer.pending == 1
        debouncer.timer.advance(0.3)
        assert applied == [999]
        assert len(debouncer.timer) == 0

    def test_cancel_after_run_is_harmless(self):
        timer = TimerQueue()
        calls = []
        handle = timer.call_later(0, calls.append, "x")
        timer.advance()
        handle.cancel()
        timer.call_later(1, calls.append, "y")
        assert timer.pending == 1
