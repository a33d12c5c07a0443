"""Repeating task scheduler driven by a fixed-rate tick."""

import logging
import time

from tick_swing.config import SwingConfig
from tick_swing.types import TickCallback, TickContext

logger = logging.getLogger(__name__)


class TaskHandle:
    """Cancellable registration returned by :meth:`TickScheduler.schedule_repeating`."""

    __slots__ = ("task_id", "_callback", "_period", "_countdown", "_cancelled")

    def __init__(self, task_id: int, callback: TickCallback, initial_delay: int, period: int) -> None:
        self.task_id = task_id
        self._callback = callback
        self._period = period
        self._countdown = initial_delay
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class TickScheduler:
    """Runs repeating tasks serially, once per tick, in registration order.

    A task scheduled while a tick is running first runs on the next tick.
    A cancelled task is never invoked again, even later in the same tick.
    """

    def __init__(self, config: SwingConfig | None = None) -> None:
        self._dt = (config if config is not None else SwingConfig()).time_step
        self._tick_number = 0
        self._tasks: list[TaskHandle] = []
        self._pending: list[TaskHandle] = []
        self._next_id = 0
        self._stop_requested = False

    @property
    def dt(self) -> float:
        """Seconds represented by one tick."""
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def tasks(self) -> list[TaskHandle]:
        return [t for t in self._tasks + self._pending if not t.cancelled]

    def schedule_repeating(
        self, callback: TickCallback, initial_delay: int = 0, period: int = 1
    ) -> TaskHandle:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        if initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {initial_delay}")
        task = TaskHandle(self._next_id, callback, initial_delay, period)
        self._next_id += 1
        self._pending.append(task)
        return task

    def cancel_all(self) -> None:
        for task in self._tasks + self._pending:
            task.cancel()
        self._tasks.clear()
        self._pending.clear()

    def _request_stop(self) -> None:
        self._stop_requested = True

    def _tick(self) -> None:
        self._tick_number += 1
        ctx = TickContext(
            tick_number=self._tick_number,
            dt=self._dt,
            elapsed=self._tick_number * self._dt,
            request_stop=self._request_stop,
        )
        self._tasks.extend(self._pending)
        self._pending = []
        for task in list(self._tasks):
            if task.cancelled:
                continue
            if task._countdown > 0:
                task._countdown -= 1
                continue
            task._countdown = task._period - 1
            task._callback(ctx)
            if self._stop_requested:
                break
        self._tasks = [t for t in self._tasks if not t.cancelled]

    def step(self) -> None:
        self._stop_requested = False
        self._tick()

    def run(self, n: int) -> None:
        self._stop_requested = False
        for _ in range(n):
            self._tick()
            if self._stop_requested:
                break

    def run_forever(self) -> None:
        self._stop_requested = False
        logger.info("scheduler running with dt=%.3fs", self._dt)
        dt = self._dt
        while not self._stop_requested:
            start = time.monotonic()
            self._tick()
            if self._stop_requested:
                break
            elapsed = time.monotonic() - start
            sleep_time = dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)
        logger.info("scheduler stopped at tick %d", self._tick_number)
