import os

from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()

DEFAULT_REGION = 'us-east-1'


def resolve_region(region=None):
    """Region from the option, else SQS_TRIGGER_REGION, else us-east-1."""
    return region or os.environ.get('SQS_TRIGGER_REGION', DEFAULT_REGION)


def get_sqs_client(region=None):
    """Get SQS client for the resolved region."""
    from sqs_trigger.io.sqs import SQSClient

    return SQSClient(resolve_region(region))
