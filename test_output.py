import io
import json
import logging
import sys

import pytest
from rich.console import Console

from conftest import QUEUE_URL, make_message
from sqs_trigger.logging_setup import JsonFormatter, setup_logging
from sqs_trigger.sinks import ConsoleSink


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    app = logging.getLogger("sqs_trigger")
    saved = (list(root.handlers), root.level, app.level)
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    app.setLevel(saved[2])


def test_console_sink_prints_one_json_line_per_message():
    out = io.StringIO()
    sink = ConsoleSink(Console(file=out, width=500))
    messages = [make_message(1), make_message(2)]

    sink.emit(messages)

    lines = out.getvalue().splitlines()
    assert [json.loads(line) for line in lines] == [m.payload for m in messages]


def test_json_formatter_includes_extra_fields():
    record = logging.makeLogRecord({
        "name": "sqs_trigger.core.cycle",
        "levelname": "ERROR",
        "msg": "[SQS] receive failed: %s",
        "args": ("timeout",),
        "queue_url": QUEUE_URL,
    })

    payload = json.loads(JsonFormatter().format(record))

    assert payload["msg"] == "[SQS] receive failed: timeout"
    assert payload["level"] == "ERROR"
    assert payload["logger"] == "sqs_trigger.core.cycle"
    assert payload["queue_url"] == QUEUE_URL
    assert "args" not in payload


def test_json_formatter_includes_traceback():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("sqs_trigger").makeRecord(
            "sqs_trigger", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info()
        )

    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in payload["exc_info"]


def test_setup_logging_levels(monkeypatch, restore_logging):
    monkeypatch.delenv("SQS_TRIGGER_ROOT_LOG_LEVEL", raising=False)
    monkeypatch.setenv("SQS_TRIGGER_APP_LOG_LEVEL", "warning")

    setup_logging()
    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("sqs_trigger").level == logging.WARNING
    assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)

    setup_logging(verbose=True)
    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("sqs_trigger").level == logging.DEBUG
