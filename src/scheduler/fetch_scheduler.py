"""Fixed-interval fetch scheduler.

The scheduler owns one daemon thread that runs a cycle immediately and
then on tick boundaries ``first_tick + k * interval``. Cycles never
overlap: ticks that pass while a cycle is still running are coalesced
into the next boundary, and manual triggers during a cycle are skipped.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable, Protocol

from core.logging_config import get_logger
from core.types import FetchOutcome

_LOGGER = get_logger(__name__)


class CycleRunner(Protocol):
    """Anything that can run one complete fetch cycle."""

    def run_cycle(self) -> FetchOutcome:
        """Run one cycle and return its outcome."""
        ...


class FetchScheduler:
    """Runs fetch cycles periodically until stopped."""

    def __init__(
        self,
        runner: CycleRunner,
        interval_seconds: float,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self._runner = runner
        self._interval_seconds = interval_seconds
        self._timer = timer
        self._stop = threading.Event()
        self._cycle_guard = threading.Lock()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the background loop; no-op when already running."""
        if self.is_running():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="FetchScheduler",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the loop to stop and wait for the running cycle to end.

        Called from inside a cycle, it only signals; the loop exits after that cycle.
        """
        self._stop.set()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    def is_running(self) -> bool:
        """Return whether the background loop thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until stop is requested; return whether it was."""
        return self._stop.wait(timeout)

    def run_cycle_now(self) -> FetchOutcome | None:
        """Run one cycle unless another one is in flight.

        Returns:
            The cycle outcome, or None when skipped.
        """
        if not self._cycle_guard.acquire(blocking=False):
            _LOGGER.warning("fetch_cycle_skipped", reason="cycle_in_flight")
            return None
        try:
            return self._runner.run_cycle()
        finally:
            self._cycle_guard.release()

    def _run_loop(self) -> None:
        _LOGGER.info("scheduler_started", interval_seconds=self._interval_seconds)
        scheduled_at = self._timer()
        while not self._stop.is_set():
            delay = scheduled_at - self._timer()
            if delay > 0 and self._stop.wait(delay):
                break
            self.run_cycle_now()
            finished_at = self._timer()
            next_scheduled_at = next_tick_after(
                scheduled_at, finished_at, self._interval_seconds
            )
            skipped_ticks = round((next_scheduled_at - scheduled_at) / self._interval_seconds) - 1
            if skipped_ticks > 0:
                _LOGGER.warning("fetch_ticks_coalesced", skipped_ticks=skipped_ticks)
            scheduled_at = next_scheduled_at
        _LOGGER.info("scheduler_stopped")


def next_tick_after(anchor: float, now: float, interval_seconds: float) -> float:
    """Return the first tick boundary strictly after ``now``.

    Args:
        anchor: Time of the tick that started the last cycle.
        now: Current timer value.
        interval_seconds: Tick period.

    Returns:
        ``anchor + k * interval_seconds`` for the smallest ``k >= 1`` past ``now``.
    """
    elapsed_ticks = math.floor((now - anchor) / interval_seconds) + 1
    return anchor + max(1, elapsed_ticks) * interval_seconds
