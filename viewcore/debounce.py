"""Cooperative timers and the debounce controller.

``TimerQueue`` is a single-threaded timer queue driven by a virtual clock:
nothing runs until the owner calls :meth:`TimerQueue.advance`. Its
``call_later`` has the same shape as ``asyncio.AbstractEventLoop.call_later``,
so a running event loop can be passed to :class:`Debouncer` instead.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Any, Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class CancelHandle(Protocol):
    def cancel(self) -> None: ...


class Timer(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> CancelHandle: ...


class TimerHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple[Any, ...], queue: Optional["TimerQueue"] = None):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False
        self._queue = queue

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._queue is not None:
            self._queue._handle_cancelled()

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        self._callback(*self._args)


# Cancelled entries are dropped once they pass this count and make up half the queue.
_PRUNE_MIN_CANCELLED = 50


class TimerQueue:
    def __init__(self) -> None:
        self._now = 0.0
        self._seq = itertools.count()
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._cancelled_count = 0

    def __len__(self) -> int:
        return len(self._heap)

    def time(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        return len(self._heap) - self._cancelled_count

    def _handle_cancelled(self) -> None:
        self._cancelled_count += 1
        if self._cancelled_count >= _PRUNE_MIN_CANCELLED and self._cancelled_count * 2 > len(self._heap):
            self._heap = [entry for entry in self._heap if not entry[2].cancelled()]
            heapq.heapify(self._heap)
            self._cancelled_count = 0

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay), callback, args, self)
        heapq.heappush(self._heap, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds: float = 0.0) -> int:
        """Move the clock forward and run every callback that came due, in order.

        Returns the number of callbacks run.
        """
        deadline = self._now + max(0.0, seconds)
        ran = 0
        while self._heap and self._heap[0][0] <= deadline:
            when, _, handle = heapq.heappop(self._heap)
            handle._queue = None
            if handle.cancelled():
                self._cancelled_count -= 1
                continue
            self._now = max(self._now, when)
            handle._run()
            ran += 1
        self._now = deadline
        return ran


class _Done:
    def cancel(self) -> None:
        return None


class Debouncer:
    """Delays ``apply(value)`` until no newer value arrives for ``delay_ms``."""

    def __init__(self, apply: Callable[[Any], None], delay_ms: int = 300, *, timer: Optional[Timer] = None):
        self._apply = apply
        self.delay_ms = delay_ms
        self.timer: Timer = timer if timer is not None else TimerQueue()
        self._handle: Optional[CancelHandle] = None

    @property
    def pending(self) -> bool:
        if self._handle is None:
            return False
        cancelled = getattr(self._handle, "cancelled", None)
        return not (cancelled is not None and cancelled())

    def schedule(self, value: Any, delay_ms: Optional[int] = None) -> CancelHandle:
        self.cancel()
        delay = self.delay_ms if delay_ms is None else delay_ms
        if delay <= 0:
            self._apply(value)
            return _Done()
        handle = self.timer.call_later(delay / 1000.0, self._fire, value)
        self._handle = handle
        return handle

    def _fire(self, value: Any) -> None:
        self._handle = None
        logger.debug("debounced value applied: %r", value)
        self._apply(value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def close(self) -> None:
        self.cancel()
