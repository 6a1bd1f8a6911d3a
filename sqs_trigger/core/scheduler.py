from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from sqs_trigger.config import MAX_TIMER_DELAY_MS, PollConfig, normalized_delay_ms

logger = logging.getLogger("sqs_trigger.core.scheduler")

CycleFn = Callable[[], Any]
TimerFactory = Callable[[float, Callable[[], None]], Any]


class PollScheduler:
    """
    Overlap-safe self-rearming timer.

    States: armed -> firing -> (skip | execute) -> rearmed or halted.

    - The first cycle fires immediately, later ones `delay_ms` after the
      previous cycle completed (not wall-clock aligned).
    - At most one cycle runs at a time: a tick that fires while a cycle is
      in flight is dropped, never queued.
    - stop() prevents any further cycle but does not interrupt the one in
      flight.

    Timers fire on their own threads, so the two flags are guarded by a lock.
    """

    def __init__(self, delay_ms: int, cycle_fn: CycleFn, timer_factory: TimerFactory = threading.Timer):
        """
        Args:
            delay_ms: Normalized delay between cycles in milliseconds
            cycle_fn: Callable running one cycle; its return value is ignored
            timer_factory: threading.Timer-compatible factory (interval in
                seconds, function) returning an object with start()/cancel()
        """
        self.delay_ms = delay_ms
        self.cycle_fn = cycle_fn
        self.timer_factory = timer_factory

        self._lock = threading.Lock()
        self._running: bool = False
        self._in_flight: bool = False
        self._stopped: bool = False
        self._timer: Optional[Any] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def start(self) -> "PollScheduler":
        """Arm the first cycle at zero delay. Returns self as the stop handle."""
        with self._lock:
            if self._running or self._stopped:
                raise RuntimeError("PollScheduler can only be started once")
            self._running = True
            self._arm(0)
        logger.info(f"Poll scheduler started (delay {self.delay_ms} ms)")
        return self

    def stop(self) -> None:
        """Stop scheduling cycles. Safe to call more than once."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            in_flight = self._in_flight

        if in_flight:
            logger.info("Poll scheduler stopped, current cycle will finish without rearming")
        else:
            logger.info("Poll scheduler stopped")

    def _arm(self, delay_ms: int) -> None:
        # Caller holds the lock. Only one timer is ever pending.
        if self._timer is not None:
            self._timer.cancel()
        timer = self.timer_factory(delay_ms / 1000.0, self._fire)
        if hasattr(timer, "daemon"):
            timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self) -> None:
        with self._lock:
            if not self._running:
                return
            if self._in_flight:
                logger.debug("Previous cycle still in flight, dropping this tick")
                self._arm(self.delay_ms)
                return
            self._in_flight = True

        try:
            outcome = self.cycle_fn()
            logger.debug(f"Cycle finished: {outcome}")
        finally:
            with self._lock:
                self._in_flight = False
                if self._running:
                    self._arm(self.delay_ms)


def start(
    cfg: PollConfig,
    cycle_fn: CycleFn,
    timer_factory: TimerFactory = threading.Timer,
    max_delay_ms: int = MAX_TIMER_DELAY_MS,
) -> PollScheduler:
    """
    Validate the configuration and start polling.

    Raises:
        ConfigurationError: before any timer is armed, if the interval is not
            positive or the delay exceeds max_delay_ms
    """
    delay_ms = normalized_delay_ms(cfg, max_delay_ms=max_delay_ms)
    return PollScheduler(delay_ms, cycle_fn, timer_factory=timer_factory).start()
