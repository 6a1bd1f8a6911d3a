from typing import Any, Dict, List

import pytest

from sqs_trigger.core.models import ReceivedMessage
from sqs_trigger.errors import TransportError

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/orders"


def make_message(n: int) -> ReceivedMessage:
    return ReceivedMessage(payload={
        "MessageId": f"id-{n}",
        "ReceiptHandle": f"handle/{n}+==",
        "Body": f'{{"order": {n}}}',
    })


class FakeTransport:
    def __init__(self, messages=None, receive_error=None, delete_error=None, batch_failed=None):
        self.messages = list(messages or [])
        self.receive_error = receive_error
        self.delete_error = delete_error
        self.batch_failed = batch_failed or []
        self.receive_calls: List[Dict[str, Any]] = []
        self.delete_calls: List[str] = []
        self.batch_calls: List[list] = []

    def receive_messages(self, queue_url, **params):
        self.receive_calls.append(dict(params, QueueUrl=queue_url))
        if self.receive_error:
            raise self.receive_error
        return list(self.messages)

    def delete_message(self, queue_url, receipt_handle):
        self.delete_calls.append(receipt_handle)
        if self.delete_error:
            raise self.delete_error

    def delete_message_batch(self, queue_url, entries):
        self.batch_calls.append(list(entries))
        if self.delete_error:
            raise self.delete_error
        return self.batch_failed


class RecordingSink:
    def __init__(self, events=None):
        self.batches: List[List[ReceivedMessage]] = []
        self.events = events

    def emit(self, batch):
        self.batches.append(batch)
        if self.events is not None:
            self.events.append("emit")


class FakeTimer:
    """threading.Timer stand-in; tests fire it by hand."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function()


class FakeTimerFactory:
    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]

    @property
    def pending(self) -> List[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def transport_error():
    return TransportError("connection reset")
