"""Tests for JSON log formatting, redaction and request correlation."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from app.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    redact,
    set_request_id,
)


@pytest.fixture
def log_stream():
    logger = logging.getLogger("test_order_limiter_logging")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def _last_record(stream: StringIO) -> dict:
    return json.loads(stream.getvalue().strip().splitlines()[-1])


def test_event_fields_are_emitted_as_json(log_stream):
    logger, stream = log_stream

    logger.info(
        "order_limiter.regenerated",
        extra={"count": 7, "ttl_s": 43200, "interval": "daily"},
    )

    record = _last_record(stream)
    assert record["message"] == "order_limiter.regenerated"
    assert record["level"] == "info"
    assert record["count"] == 7
    assert record["ttl_s"] == 43200
    assert record["interval"] == "daily"


def test_api_keys_are_redacted(log_stream):
    logger, stream = log_stream

    logger.info(
        "auth.failed",
        extra={
            "api_key": "sk-secret-123",
            "headers": {"X-API-Key": "another-secret", "user-agent": "pytest"},
            "reason": "invalid_api_key",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "pytest" in output
    assert "invalid_api_key" in output


def test_request_id_from_context(log_stream):
    logger, stream = log_stream
    set_request_id("req-123")

    logger.info("limits.regenerated")

    assert _last_record(stream)["request_id"] == "req-123"


def test_no_request_id_outside_a_request(log_stream):
    logger, stream = log_stream

    logger.info("order_limiter.stores_initialized")

    assert "request_id" not in _last_record(stream)


def test_redact_handles_sequences():
    value = [{"token": "abc", "count": 1}, ("plain",)]

    assert redact(value) == [{"token": "[REDACTED]", "count": 1}, ("plain",)]
