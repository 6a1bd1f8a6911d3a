from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol, Sequence

from sqs_trigger.config import PollConfig, PollOptions, validate_options
from sqs_trigger.core.models import CycleOutcome, CycleStatus, DeleteBatchEntry, ReceivedMessage
from sqs_trigger.errors import TransportError, ValidationError
from sqs_trigger.sinks import Sink

logger = logging.getLogger("sqs_trigger.core.cycle")


class QueueTransport(Protocol):
    def receive_messages(self, queue_url: str, **params: Any) -> List[ReceivedMessage]: ...

    def delete_message(self, queue_url: str, receipt_handle: str) -> None: ...

    def delete_message_batch(
        self, queue_url: str, entries: Sequence[DeleteBatchEntry]
    ) -> List[Dict[str, Any]]: ...


def build_receive_params(options: PollOptions) -> Dict[str, Any]:
    """
    Build ReceiveMessage arguments from the poll options.

    Options that are not set are left out so the queue defaults apply.

    Raises:
        ValidationError: if a set option is out of range
    """
    validate_options(options)

    params: Dict[str, Any] = {
        "MessageAttributeNames": ["All"],
        "AttributeNames": ["All"],
    }
    if options.visibility_timeout is not None:
        params["VisibilityTimeout"] = options.visibility_timeout
    if options.max_number_of_messages is not None:
        params["MaxNumberOfMessages"] = options.max_number_of_messages
    if options.wait_time_seconds is not None:
        params["WaitTimeSeconds"] = options.wait_time_seconds
    return params


def build_delete_batch(messages: Sequence[ReceivedMessage]) -> List[DeleteBatchEntry]:
    """Tag each message with a 1-based id (msg1, msg2, ...) in receipt order."""
    return [
        DeleteBatchEntry(id=f"msg{position}", receipt_handle=msg.receipt_handle)
        for position, msg in enumerate(messages, start=1)
    ]


def execute_cycle(cfg: PollConfig, transport: QueueTransport, sink: Sink) -> CycleOutcome:
    """
    Run one receive / deliver / delete round trip.

    Invalid options and transport failures are logged and reported in the
    returned outcome, never raised. Sink errors propagate.
    """
    queue_url = cfg.queue_url

    try:
        params = build_receive_params(cfg.options)
    except ValidationError as e:
        logger.error(f"[SQS] invalid receive options, skipping cycle: {e}", extra={"queue_url": queue_url})
        return CycleOutcome(CycleStatus.INVALID_OPTIONS, error=e)

    try:
        messages = transport.receive_messages(queue_url, **params)
    except TransportError as e:
        logger.error(f"[SQS] receive failed: {e}", extra={"queue_url": queue_url})
        return CycleOutcome(CycleStatus.RECEIVE_FAILED, error=e)

    if not messages:
        return CycleOutcome(CycleStatus.EMPTY)

    logger.debug(
        f"Received {len(messages)} message(s): {', '.join(msg.message_id for msg in messages)}",
        extra={"queue_url": queue_url},
    )

    # Deliver before deleting: a failed delete must not lose the batch
    sink.emit(list(messages))

    if not cfg.options.delete_messages:
        return CycleOutcome(CycleStatus.DELIVERED, received=len(messages))

    try:
        delete_failures = _delete_received(queue_url, transport, messages)
    except TransportError as e:
        logger.error(
            f"[SQS] delete failed, {len(messages)} message(s) will be redelivered after visibility timeout: {e}",
            extra={"queue_url": queue_url},
        )
        return CycleOutcome(CycleStatus.DELETE_FAILED, received=len(messages), error=e)

    return CycleOutcome(
        CycleStatus.DELIVERED,
        received=len(messages),
        deleted=delete_failures == 0,
        delete_failures=delete_failures,
    )


def _delete_received(queue_url: str, transport: QueueTransport, messages: Sequence[ReceivedMessage]) -> int:
    """Delete the cycle's messages. Returns how many entries SQS refused."""
    if len(messages) == 1:
        transport.delete_message(queue_url, messages[0].receipt_handle)
        return 0

    failed = transport.delete_message_batch(queue_url, build_delete_batch(messages))
    if failed:
        ids = ", ".join(str(entry.get("Id")) for entry in failed)
        logger.warning(
            f"[SQS] {len(failed)} of {len(messages)} batch delete entries failed: {ids}",
            extra={"queue_url": queue_url},
        )
    return len(failed)
