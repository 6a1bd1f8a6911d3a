from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

@dataclass(frozen=True)
class QueueDescriptor:
    name: str                  # last path segment of the URL
    url: str

@dataclass(frozen=True)
class ReceivedMessage:
    payload: Dict[str, Any]    # raw SQS message dict, delivered as-is

    @property
    def message_id(self) -> str:
        return self.payload.get("MessageId", "")

    @property
    def receipt_handle(self) -> str:
        return self.payload["ReceiptHandle"]

@dataclass(frozen=True)
class DeleteBatchEntry:
    id: str                    # msg1, msg2, ... local to one batch
    receipt_handle: str

    def to_request(self) -> Dict[str, str]:
        return {"Id": self.id, "ReceiptHandle": self.receipt_handle}

class CycleStatus(str, Enum):
    EMPTY = "empty"
    DELIVERED = "delivered"
    INVALID_OPTIONS = "invalid_options"
    RECEIVE_FAILED = "receive_failed"
    DELETE_FAILED = "delete_failed"

@dataclass(frozen=True)
class CycleOutcome:
    status: CycleStatus
    received: int = 0
    deleted: bool = False
    delete_failures: int = 0   # batch entries SQS refused to delete
    error: Optional[Exception] = field(default=None, compare=False)
