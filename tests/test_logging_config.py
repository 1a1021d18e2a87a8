from __future__ import annotations

import json
import logging

from flashcards.logging_config import MinimalJSONFormatter
from flashcards.telemetry import log_event


def _record(msg, **extra) -> logging.LogRecord:
    record = logging.LogRecord("flashcards.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_message_and_extra_fields() -> None:
    payload = json.loads(MinimalJSONFormatter().format(_record("hello", req_id="abc")))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "flashcards.test"
    assert payload["req_id"] == "abc"
    assert payload["ts"].endswith("Z")


def test_formatter_merges_structured_events() -> None:
    payload = json.loads(MinimalJSONFormatter().format(_record({"step": "pipeline.start", "details": {"pages": 3}})))

    assert payload["step"] == "pipeline.start"
    assert payload["details"] == {"pages": 3}
    assert "message" not in payload


def test_log_event_attaches_exception(caplog) -> None:
    logger = logging.getLogger("flashcards.test.events")
    try:
        raise ValueError("broken")
    except ValueError as error:
        with caplog.at_level(logging.ERROR, logger=logger.name):
            log_event(logger, "exception", level="error", req_id="r1", exc=error, duration_ms=1.23456)

    (record,) = [item for item in caplog.records if item.name == logger.name]
    assert record.msg["req_id"] == "r1"
    assert record.msg["duration_ms"] == 1.235
    assert "ValueError: broken" in record.msg["exc"]
