"""
SQS Trigger Run CLI - Poll a queue until stopped.

Usage:
  sqs-trigger run --queue-url https://sqs... --interval 1 --unit minutes --delete-messages

Environment variables:
  SQS_TRIGGER_QUEUE_URL (fallback for --queue-url)
  SQS_TRIGGER_REGION (AWS region)
"""

import logging
import os
import signal
import sys
import threading
from typing import Any

import click
from rich.console import Console

from sqs_trigger.cli import common
from sqs_trigger.config import IntervalUnit, PollConfig, PollOptions
from sqs_trigger.errors import ConfigurationError

console = Console()
logger = logging.getLogger("sqs_trigger.cli.run")

# How often the main thread wakes up while waiting for a stop signal
_WAIT_SLICE_SECONDS = 1.0


def install_signal_handlers(stop_event: threading.Event) -> None:
    """
    Install signal handlers for graceful shutdown.

    Handles SIGTERM (sent by systemd/containers) and SIGINT (Ctrl+C).
    The first signal sets stop_event; the cycle in flight, if any, finishes.
    A second signal forces an immediate exit.
    """

    def signal_handler(signum: int, frame: Any) -> None:
        sig_name = signal.Signals(signum).name
        if not stop_event.is_set():
            logger.info(f"Received {sig_name} signal. Stopping the poll schedule.")
            stop_event.set()
        else:
            logger.warning(
                f"Received second {sig_name} signal. Forcing immediate shutdown. "
                "Undeleted messages will be redelivered after visibility timeout expires."
            )
            raise KeyboardInterrupt("Forced shutdown by second signal")

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)
    logger.info("Signal handlers installed for graceful shutdown (SIGTERM, SIGINT)")


@click.command()
@click.option('--queue-url', type=str, help='SQS queue URL (default: from SQS_TRIGGER_QUEUE_URL env)')
@click.option('--interval', type=float, default=1, show_default=True, help='Interval between polls')
@click.option('--unit', type=click.Choice([u.value for u in IntervalUnit]), default='seconds', show_default=True,
              help='Unit of the interval value')
@click.option('--delete-messages/--no-delete-messages', default=False, show_default=True,
              help='Delete messages after delivering them')
@click.option('--visibility-timeout', type=int, help='Visibility timeout for received messages (0-43200 seconds)')
@click.option('--max-messages', type=int, help='Maximum messages per poll (1-10)')
@click.option('--wait-time', type=int, help='Long polling wait time (0-20 seconds)')
@click.option('--region', type=str, help='AWS region (default: from SQS_TRIGGER_REGION env or us-east-1)')
def run(queue_url, interval, unit, delete_messages, visibility_timeout, max_messages, wait_time, region):
    """Poll an SQS queue and print received messages as JSON lines."""

    from sqs_trigger.core.runtime import SQSTriggerRuntime
    from sqs_trigger.sinks import ConsoleSink

    queue_url = queue_url or os.environ.get('SQS_TRIGGER_QUEUE_URL')
    if not queue_url:
        console.print("[red]Error:[/red] Missing queue URL. Provide --queue-url or set SQS_TRIGGER_QUEUE_URL")
        sys.exit(1)

    cfg = PollConfig(
        queue_url=queue_url,
        interval=interval,
        unit=IntervalUnit(unit),
        options=PollOptions(
            delete_messages=delete_messages,
            visibility_timeout=visibility_timeout,
            max_number_of_messages=max_messages,
            wait_time_seconds=wait_time,
        ),
    )

    runtime = SQSTriggerRuntime(
        cfg=cfg,
        transport=common.get_sqs_client(region),
        sink=ConsoleSink(console),
    )

    try:
        runtime.start()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    stop_event = threading.Event()
    install_signal_handlers(stop_event)

    try:
        while not stop_event.wait(_WAIT_SLICE_SECONDS):
            pass
    except KeyboardInterrupt:
        logger.info("Trigger interrupted")
    finally:
        runtime.stop()
        if runtime.scheduler is not None and runtime.scheduler.in_flight:
            logger.info("Waiting for the current cycle to complete")
        runtime.wait_until_idle()
        logger.info("Trigger shutdown complete")
