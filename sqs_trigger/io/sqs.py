from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sqs_trigger.core.models import DeleteBatchEntry, QueueDescriptor, ReceivedMessage
from sqs_trigger.errors import TransportError


class SQSClient:
    """AWS SQS transport used by the trigger."""

    def __init__(self, region: str, client: Any = None):
        """
        Initialize SQS client.

        Args:
            region: AWS region (e.g., "us-east-1")
            client: Optional pre-built boto3 SQS client (credentials and
                endpoint are then the caller's business)
        """
        self.region = region
        self.client = client or boto3.client('sqs', region_name=region)

    def list_queues(self, prefix: Optional[str] = None) -> List[QueueDescriptor]:
        """
        List the queues visible to the current credentials.

        Args:
            prefix: Only return queues whose name starts with this prefix

        Returns:
            One descriptor per queue URL, in the order SQS returns them
        """
        kwargs: Dict[str, Any] = {'MaxResults': 1000}
        if prefix:
            kwargs['QueueNamePrefix'] = prefix

        urls: List[str] = []
        try:
            while True:
                response = self.client.list_queues(**kwargs)
                urls.extend(response.get('QueueUrls', []))
                next_token = response.get('NextToken')
                if not next_token:
                    break
                kwargs['NextToken'] = next_token
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to list SQS queues: {e}") from e

        return [QueueDescriptor(name=url.rstrip('/').split('/')[-1], url=url) for url in urls]

    def receive_messages(self, queue_url: str, **params: Any) -> List[ReceivedMessage]:
        """
        Receive messages from the queue.

        Args:
            queue_url: SQS queue URL
            **params: Extra ReceiveMessage arguments (VisibilityTimeout,
                MaxNumberOfMessages, WaitTimeSeconds, ...)

        Returns:
            Received messages in queue order; empty list if none were available
        """
        try:
            response = self.client.receive_message(QueueUrl=queue_url, **params)
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to receive messages from SQS: {e}") from e

        return [ReceivedMessage(payload=msg) for msg in response.get('Messages', [])]

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """
        Delete a message from the queue.

        Args:
            queue_url: SQS queue URL
            receipt_handle: Receipt handle from received message
        """
        try:
            self.client.delete_message(
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to delete SQS message: {e}") from e

    def delete_message_batch(
        self,
        queue_url: str,
        entries: Sequence[DeleteBatchEntry],
    ) -> List[Dict[str, Any]]:
        """
        Delete several messages in one call.

        SQS reports per-entry failures in the response instead of raising.

        Args:
            queue_url: SQS queue URL
            entries: Batch entries (at most 10)

        Returns:
            The `Failed` entries of the response (empty when all were deleted)
        """
        try:
            response = self.client.delete_message_batch(
                QueueUrl=queue_url,
                Entries=[entry.to_request() for entry in entries]
            )
        except (ClientError, BotoCoreError) as e:
            raise TransportError(f"Failed to delete SQS message batch: {e}") from e

        return response.get('Failed', [])
