from __future__ import annotations
from typing import List, Optional, Protocol

from rich.console import Console

from sqs_trigger.core.models import ReceivedMessage


class Sink(Protocol):
    """
    Downstream consumer of received messages.

    Receives one cycle's messages together. Errors raised here are not caught
    by the trigger.
    """

    def emit(self, batch: List[ReceivedMessage]) -> None: ...


class ConsoleSink:
    """Print each message as one JSON line."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def emit(self, batch: List[ReceivedMessage]) -> None:
        for msg in batch:
            self.console.print_json(data=msg.payload, indent=None)
