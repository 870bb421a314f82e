"""Unit tests for structured logging utilities in ``observability``."""

from __future__ import annotations

import logging

import pytest

from lib_sender_options import LoggingObservationRegistry, SenderObservationContext, bind_trace_id, get_logger
from lib_sender_options.observability import TRACE_ID, log_info, make_event


def test_null_handler_present() -> None:
    """Package logger should always include a NullHandler to avoid surprises."""

    logger = get_logger()
    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)


def test_trace_id_in_log(caplog: pytest.LogCaptureFixture) -> None:
    """Structured logs should include the bound trace identifier and contextual fields."""

    caplog.set_level(logging.INFO, logger="lib_sender_options")
    bind_trace_id("trace-123")
    log_info("properties-merged", source="env", path=None)
    bind_trace_id(None)
    record = caplog.records[-1]
    assert getattr(record, "context") == {"trace_id": "trace-123", "source": "env", "path": None}


def test_bind_trace_id_clears_context() -> None:
    bind_trace_id("trace-temp")
    bind_trace_id(None)
    assert TRACE_ID.get() is None


def test_make_event_merges_optional_payload() -> None:
    assert make_event("file", "/etc/producer.properties", {"keys": 3}) == {
        "source": "file",
        "path": "/etc/producer.properties",
        "keys": 3,
    }


def test_logging_registry_reports_start_and_stop(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_sender_options")
    registry = LoggingObservationRegistry()
    with registry.observe(SenderObservationContext(topic="orders", client_id="producer-9")):
        pass
    messages = [record.getMessage() for record in caplog.records]
    assert messages[-2:] == ["observation_started", "observation_stopped"]
    stopped = getattr(caplog.records[-1], "context")
    assert stopped["contextual_name"] == "orders send"
    assert stopped["tags"]["sender.client.id"] == "producer-9"
    assert stopped["elapsed_ms"] >= 0
    assert registry.is_noop is False


def test_logging_registry_reraises_failures(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lib_sender_options")
    with pytest.raises(RuntimeError, match="broker down"):
        with LoggingObservationRegistry().observe(SenderObservationContext(topic="orders")):
            raise RuntimeError("broker down")
    failed = caplog.records[-1]
    assert failed.getMessage() == "observation_failed"
    assert failed.levelno == logging.ERROR
    assert getattr(failed, "context")["error"] == "broker down"
