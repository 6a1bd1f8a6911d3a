from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from sqs_trigger.config import MAX_TIMER_DELAY_MS, IntervalUnit, PollConfig
from sqs_trigger.core import scheduler
from sqs_trigger.core.cycle import QueueTransport, execute_cycle
from sqs_trigger.core.models import CycleOutcome
from sqs_trigger.core.scheduler import PollScheduler, TimerFactory
from sqs_trigger.sinks import Sink

logger = logging.getLogger("sqs_trigger.core.runtime")


class SQSTriggerRuntime:
    """
    Wires a poll configuration, a queue transport and a sink together.

    Flow:
    1. start(): validate the configuration and arm the scheduler
    2. Every cycle: receive, emit the batch to the sink, optionally delete
    3. stop(): no further cycle is scheduled; a running one finishes
    """

    def __init__(
        self,
        cfg: PollConfig,
        transport: QueueTransport,
        sink: Sink,
        timer_factory: TimerFactory = threading.Timer,
        max_delay_ms: int = MAX_TIMER_DELAY_MS,
    ):
        self.cfg = cfg
        self.transport = transport
        self.sink = sink
        self.timer_factory = timer_factory
        self.max_delay_ms = max_delay_ms

        self.scheduler: Optional[PollScheduler] = None

    def run_cycle(self) -> CycleOutcome:
        return execute_cycle(self.cfg, self.transport, self.sink)

    def start(self) -> PollScheduler:
        """
        Start polling.

        Raises:
            ConfigurationError: if the configuration cannot be scheduled
        """
        logger.info(
            "Starting SQS trigger",
            extra={
                "queue_url": self.cfg.queue_url,
                "interval": self.cfg.interval,
                "unit": IntervalUnit.parse(self.cfg.unit).value,
                "delete_messages": self.cfg.options.delete_messages,
            },
        )
        self.scheduler = scheduler.start(
            self.cfg,
            self.run_cycle,
            timer_factory=self.timer_factory,
            max_delay_ms=self.max_delay_ms,
        )
        return self.scheduler

    def stop(self) -> None:
        if self.scheduler is not None:
            self.scheduler.stop()

    def wait_until_idle(self, timeout: Optional[float] = None, poll_seconds: float = 0.1) -> bool:
        """
        Block until no cycle is in flight.

        Meant to be called after stop(): once stopped, no new cycle can start,
        so this returns as soon as the running one (if any) has finished.

        Returns:
            True if idle, False if the timeout expired first
        """
        if self.scheduler is None:
            return True

        deadline = None if timeout is None else time.monotonic() + timeout
        while self.scheduler.in_flight:
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(poll_seconds)
        return True
