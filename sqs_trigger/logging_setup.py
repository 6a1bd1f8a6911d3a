import json
import logging
import os
import sys
import time
from typing import Any, Dict

# CloudWatch-ready logs (JSON lines on stdout)
# everything is WARNING by default, except logging.getLogger("sqs_trigger") (and sub loggers) which is INFO

_RESERVED_ATTRS = (
    "args", "msg", "levelname", "name", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno",
    "funcName", "created", "msecs", "relativeCreated", "thread",
    "threadName", "processName", "process", "taskName", "levelno",
)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for k, v in record.__dict__.items():
            if k in _RESERVED_ATTRS:
                continue
            if k.startswith("_"):
                continue
            payload.setdefault(k, v)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(verbose: bool = False) -> None:
    """
    Setup logging with JSON formatting.

    Args:
        verbose: If True, sets sqs_trigger logger to DEBUG and root logger to INFO.
                 If False, uses environment variables or defaults (WARNING for root, INFO for sqs_trigger).
    """
    if verbose:
        root_level = "INFO"
        app_level = "DEBUG"
    else:
        root_level = os.environ.get("SQS_TRIGGER_ROOT_LOG_LEVEL", "WARNING").upper()
        app_level = os.environ.get("SQS_TRIGGER_APP_LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    # Handler should not filter - let loggers control what gets through
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Root logger: controls botocore and other third-party libraries
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    root.addHandler(handler)

    app_logger = logging.getLogger("sqs_trigger")
    app_logger.setLevel(app_level)
    app_logger.propagate = True  # still go to root handler
