"""
Timer Manager Module for NeuralStride.

Purpose:
    Run fixed-period tasks (plant health tick, background drift tick) from an
    explicit clock instead of wall-clock timers, so tick-driven behavior can
    be replayed deterministically.

Key Concepts:
    - A "task" is a named callback with a period in seconds.
    - run_pending(now) fires every task whose next due time has passed. A task
      that fell several periods behind fires once per missed period, in order.
    - Clocks are plain zero-argument callables returning seconds. ManualClock
      is the test/replay clock; time.monotonic is the default.

Usage Pattern:
    from neuralstride.monitoring.timer_manager import TickScheduler, ManualClock

    clock = ManualClock()
    scheduler = TickScheduler(clock)
    scheduler.every("plant", 1.0, simulator.tick)

    clock.advance(10)
    scheduler.run_pending()   # plant tick fires 10 times

Design Decisions:
    - Single-threaded: the caller decides when run_pending() is invoked
      (per processed frame, per Streamlit rerun, or from a sleep loop).
    - Cancelling a task only stops future scheduling; a callback that is
      already running is not interrupted.

Author: NeuralStride Engineering
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import logging
import time

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ManualClock:
    """Clock whose time only moves when advance() is called."""

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("seconds must be >= 0")
        self._now += seconds
        return self._now


@dataclass
class ScheduledTask:
    """
    State for a single periodic task.

    Attributes:
        period: Seconds between runs.
        callback: Called with the scheduled fire time.
        next_due: Time at which the task next fires.
        runs: Number of times the task has fired.
    """
    period: float
    callback: Callable[[float], None]
    next_due: float
    runs: int = 0


class TickScheduler:
    """
    Drive named periodic tasks from an injectable clock.

    Public API:
        - every(name, period, callback) -> None
        - cancel(name) -> bool
        - is_scheduled(name) -> bool
        - run_pending(now=None) -> List[str]
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock: Clock = clock or time.monotonic
        self._tasks: Dict[str, ScheduledTask] = {}

    def every(self, name: str, period: float, callback: Callable[[float], None]) -> None:
        """
        Register (or replace) a task. The first run is one period from now.
        """
        if period <= 0:
            raise ValueError("period must be > 0")
        self._tasks[name] = ScheduledTask(
            period=float(period),
            callback=callback,
            next_due=self.clock() + period,
        )
        logger.debug("Scheduled %s every %.1fs", name, period)

    def cancel(self, name: str) -> bool:
        """Stop scheduling a task. Returns False if it was not scheduled."""
        return self._tasks.pop(name, None) is not None

    def is_scheduled(self, name: str) -> bool:
        return name in self._tasks

    def run_pending(self, now: Optional[float] = None) -> List[str]:
        """
        Fire every due task.

        Returns:
            Names of the tasks fired, one entry per run.
        """
        now = self.clock() if now is None else now
        fired: List[str] = []

        for name in list(self._tasks):
            task = self._tasks.get(name)
            while task is not None and task.next_due <= now:
                due = task.next_due
                task.next_due += task.period
                task.runs += 1
                task.callback(due)
                fired.append(name)
                # the callback may have cancelled its own task
                task = self._tasks.get(name)

        return fired

    def get_state_snapshot(self, now: Optional[float] = None) -> Dict[str, Dict[str, float]]:
        """Diagnostic view: period, runs and seconds until the next run."""
        now = self.clock() if now is None else now
        return {
            name: {
                "period": task.period,
                "runs": task.runs,
                "ready_in": max(0.0, task.next_due - now),
            }
            for name, task in self._tasks.items()
        }

    def __repr__(self) -> str:
        parts = [f"{name}(period={t.period}, runs={t.runs})" for name, t in self._tasks.items()]
        return f"TickScheduler({', '.join(parts)})"
