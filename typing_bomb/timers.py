"""Cooperative timers on a logical millisecond clock.

Nothing here runs on its own: the owner feeds elapsed time to
`Scheduler.advance`, which fires whatever became due, one callback at a
time, each running to completion before the next one starts.
"""

from __future__ import annotations
import itertools
from typing import Callable, List, Optional


class Timer:
    def __init__(self, scheduler: "Scheduler", due: float, interval: Optional[float],
                 callback: Callable[[], None], seq: int, name: str = ""):
        self._scheduler = scheduler
        self.due = due
        self.interval = interval
        self.callback = callback
        self.seq = seq
        self.name = name
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.cancelled

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._scheduler._drop(self)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else f"due={self.due}"
        return f"<Timer {self.name or self.seq} {state}>"


class Scheduler:
    def __init__(self):
        self.now: float = 0.0
        self._timers: List[Timer] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._timers)

    def every(self, interval_ms: float, callback: Callable[[], None], name: str = "") -> Timer:
        if interval_ms <= 0:
            raise ValueError("interval must be positive")
        t = Timer(self, self.now + interval_ms, interval_ms, callback, next(self._seq), name)
        self._timers.append(t)
        return t

    def after(self, delay_ms: float, callback: Callable[[], None], name: str = "") -> Timer:
        t = Timer(self, self.now + max(0.0, delay_ms), None, callback, next(self._seq), name)
        self._timers.append(t)
        return t

    def _drop(self, timer: Timer) -> None:
        try:
            self._timers.remove(timer)
        except ValueError:
            pass

    def _next_due(self, until: float) -> Optional[Timer]:
        best = None
        for t in self._timers:
            if t.due <= until and (best is None or (t.due, t.seq) < (best.due, best.seq)):
                best = t
        return best

    def advance(self, elapsed_ms: float) -> int:
        """Move the clock forward and fire everything due, in due order.

        Repeating timers that fell behind fire once per missed interval.
        Returns how many callbacks ran.
        """
        until = self.now + max(0.0, elapsed_ms)
        fired = 0
        while True:
            t = self._next_due(until)
            if t is None:
                break
            self.now = t.due
            if t.interval is None:
                t.cancelled = True
                self._drop(t)
            else:
                t.due += t.interval
            t.callback()
            fired += 1
        self.now = until
        return fired

    def cancel_all(self) -> None:
        for t in list(self._timers):
            t.cancel()
