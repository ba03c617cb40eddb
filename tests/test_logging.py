from __future__ import annotations

import io
import json
import logging

import pytest
from pythonjsonlogger import jsonlogger

from mytube_common import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if isinstance(handler.formatter, jsonlogger.JsonFormatter):
            root.removeHandler(handler)
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "apscheduler"):
        managed = logging.getLogger(name)
        managed.handlers = []
        managed.propagate = True


def test_records_are_json_with_service_field(restore_logging) -> None:
    root = setup_logging(level="debug", service="mytube-audio")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, jsonlogger.JsonFormatter)
    assert logging.getLogger("apscheduler").propagate is False

    buffer = io.StringIO()
    root.handlers[0].setStream(buffer)
    logging.getLogger("tests.logging").info("Cache hit", extra={"video_id": "dQw4w9WgXcQ"})

    record = json.loads(buffer.getvalue().splitlines()[-1])
    assert record["message"] == "Cache hit"
    assert record["video_id"] == "dQw4w9WgXcQ"
    assert record["service"] == "mytube-audio"
    assert record["levelname"] == "INFO"


def test_level_defaults_to_environment(restore_logging, monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")

    assert setup_logging().level == logging.WARNING
