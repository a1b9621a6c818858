"""Tests for structured logging setup."""

import io
import json
import logging
import threading
from collections.abc import Generator

import pytest
import structlog

from aws_actor.observability import bind_client_context, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None]:
    """Restore structlog defaults after each test."""
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self) -> None:
        """Test events are rendered as JSON lines."""
        output = io.StringIO()
        configure_logging(output=output)

        get_logger("test").info("request_complete", outcome="success")

        record = json.loads(output.getvalue().strip().splitlines()[-1])
        assert record["event"] == "request_complete"
        assert record["outcome"] == "success"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_level_filtering(self) -> None:
        """Test events below the configured level are dropped."""
        output = io.StringIO()
        configure_logging(level=logging.WARNING, output=output)

        get_logger("test").info("request_state_transition")

        assert output.getvalue() == ""

    def test_client_context_is_merged(self) -> None:
        """Test bound client context appears on every event."""
        output = io.StringIO()
        configure_logging(output=output)
        bind_client_context("abc123")

        get_logger("test").info("credentials_refreshed")

        record = json.loads(output.getvalue().strip().splitlines()[-1])
        assert record["client_id"] == "abc123"


class TestBindClientContext:
    """Tests for per-thread client context."""

    def test_context_is_thread_local(self) -> None:
        """Test context bound on a worker thread stays on that thread."""
        seen: dict[str, object] = {}

        def worker() -> None:
            bind_client_context("worker-client")
            seen.update(structlog.contextvars.get_contextvars())

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join()

        assert seen["client_id"] == "worker-client"
        assert "client_id" not in structlog.contextvars.get_contextvars()
