"""Cooperative scheduler: one clock driving every periodic simulation task.

All timers of the command center (network ticks, metric samples, live
feeds, pulse expiry) are registered here instead of owning their own
interval.  The clock is *virtual*: ``advance(seconds)`` fires every due
callback in time order, which makes the whole engine steppable in tests.
``run_realtime`` / ``catch_up`` drive the same clock from the wall clock
for the CLI live mode and the dashboard.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

Period = float | Callable[[], float]


@dataclass(eq=False)
class Task:
    """Handle for a scheduled callback.  Cancel via ``Scheduler.cancel``."""

    name: str
    callback: Callable[[], object]
    due: float
    period: Period | None = None   # None -> one-shot
    cancelled: bool = False
    runs: int = field(default=0)

    @property
    def periodic(self) -> bool:
        return self.period is not None

    def next_delay(self) -> float:
        p = self.period
        delay = p() if callable(p) else float(p)  # type: ignore[arg-type]
        if delay <= 0:
            raise ValueError(f"task {self.name!r}: period must be > 0, got {delay}")
        return delay


class Scheduler:
    """Min-heap of tasks keyed by due time on a virtual clock (seconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._heap: list[tuple[float, int, Task]] = []
        self._seq = itertools.count()
        self._wall_anchor: float | None = None

    # ── clock ─────────────────────────────────────────────────────────────

    @property
    def now(self) -> float:
        return self._now

    # ── registration ─────────────────────────────────────────────────────

    def _push(self, task: Task) -> Task:
        heapq.heappush(self._heap, (task.due, next(self._seq), task))
        return task

    def every(self, period: Period, callback: Callable[[], object], name: str = "") -> Task:
        """Run *callback* every *period* seconds, first run one period from now.

        *period* may be a callable returning a fresh delay each cycle
        (jittered timers).
        """
        task = Task(name=name or getattr(callback, "__name__", "task"),
                    callback=callback, due=0.0, period=period)
        task.due = self._now + task.next_delay()
        log.debug("Scheduled periodic task %s (first at t=%.2f)", task.name, task.due)
        return self._push(task)

    def call_later(self, delay: float, callback: Callable[[], object], name: str = "") -> Task:
        """Run *callback* once, *delay* seconds from now."""
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        task = Task(name=name or getattr(callback, "__name__", "once"),
                    callback=callback, due=self._now + delay)
        return self._push(task)

    def cancel(self, task: Task) -> None:
        """Mark *task* cancelled; it is dropped lazily from the heap."""
        if not task.cancelled:
            task.cancelled = True
            log.debug("Cancelled task %s", task.name)

    def cancel_all(self) -> None:
        for _, _, task in self._heap:
            task.cancelled = True
        self._heap.clear()

    @property
    def pending(self) -> list[Task]:
        """Live (non-cancelled) tasks, ordered by due time."""
        return [t for _, _, t in sorted(self._heap) if not t.cancelled]

    # ── stepping ──────────────────────────────────────────────────────────

    def advance(self, seconds: float) -> int:
        """Move the clock forward by *seconds*, firing due tasks in order.

        Returns the number of callbacks executed.  A callback may schedule or
        cancel tasks; new tasks due inside the window still fire.
        """
        if seconds < 0:
            raise ValueError(f"cannot advance by a negative amount: {seconds}")
        target = self._now + seconds
        fired = 0
        while self._heap and self._heap[0][0] <= target:
            due, _, task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            self._now = due
            task.runs += 1
            task.callback()
            fired += 1
            if task.periodic and not task.cancelled:
                task.due = due + task.next_delay()
                self._push(task)
        self._now = target
        return fired

    def catch_up(self) -> int:
        """Advance the virtual clock by the wall time elapsed since last call."""
        wall = time.monotonic()
        if self._wall_anchor is None:
            self._wall_anchor = wall
            return 0
        elapsed = wall - self._wall_anchor
        self._wall_anchor = wall
        return self.advance(elapsed)

    def sync(self) -> int:
        """Catch up to wall time if the clock follows it; no-op on pure virtual time."""
        if self._wall_anchor is None:
            return 0
        return self.catch_up()

    def run_realtime(self, duration: float | None = None, resolution: float = 0.25) -> None:
        """Block and drive the clock from the wall clock.

        Runs for *duration* seconds, or forever when ``None`` (stop with
        Ctrl+C).
        """
        self._wall_anchor = time.monotonic()
        end = None if duration is None else self._now + duration
        log.info("Scheduler real-time loop (resolution=%.0f ms)", resolution * 1000)
        while end is None or self._now < end:
            time.sleep(resolution)
            self.catch_up()
            if end is not None and self._now > end:
                break
