"""Structured Logging — JSONFormatter output shape."""

import json
import logging

from piggybank.infrastructure.observability import JSONFormatter


def _record(msg="hello", **extra):
    record = logging.LogRecord(
        "piggybank.test", logging.WARNING, __file__, 1, msg, None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "piggybank.test"
    assert payload["message"] == "hello"
    assert "timestamp" in payload


def test_surfaces_retry_extras():
    payload = json.loads(JSONFormatter().format(
        _record(attempt=2, delay_ms=2000, error_code="LLM_TIMEOUT"),
    ))
    assert payload["attempt"] == 2
    assert payload["delay_ms"] == 2000
    assert payload["error_code"] == "LLM_TIMEOUT"


def test_omits_absent_extras():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "attempt" not in payload
    assert "plan_id" not in payload
