"""Tests for logging configuration.

Tests verify:
- configure_logging sets up JSON logging correctly
- TraceIDFilter adds trace IDs to log records
- ContextAdapter stamps per-call fields without mutating shared state
- LogContext scopes and restores trace IDs
"""

import json
import logging
from io import StringIO

import pytest

from libs.common.logging.config import (
    ContextAdapter,
    TraceIDFilter,
    configure_logging,
    get_logger,
)
from libs.common.logging.context import LogContext, clear_trace_id, get_trace_id, set_trace_id
from libs.common.logging.formatter import JSONFormatter


class TestTraceIDFilter:
    """Test suite for TraceIDFilter."""

    def setup_method(self) -> None:
        clear_trace_id()

    def teardown_method(self) -> None:
        clear_trace_id()

    @pytest.mark.unit()
    def test_filter_adds_trace_id_to_record(self) -> None:
        """Test that filter adds trace ID from context to record."""
        record = logging.LogRecord("test", logging.INFO, "/f.py", 1, "Test", (), None)

        set_trace_id("req-123")
        result = TraceIDFilter().filter(record)

        assert result is True
        assert record.trace_id == "req-123"  # type: ignore[attr-defined]

    @pytest.mark.unit()
    def test_filter_adds_none_when_no_trace_id(self) -> None:
        """Test that filter adds None when no trace ID in context."""
        record = logging.LogRecord("test", logging.INFO, "/f.py", 1, "Test", (), None)

        TraceIDFilter().filter(record)

        assert record.trace_id is None  # type: ignore[attr-defined]


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def teardown_method(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(logging.WARNING)

    @pytest.mark.unit()
    def test_configure_logging_returns_root_logger(self) -> None:
        assert configure_logging(service_name="test") is logging.getLogger()

    @pytest.mark.unit()
    def test_configure_logging_sets_log_level(self) -> None:
        logger = configure_logging(service_name="test", log_level="debug")

        assert logger.level == logging.DEBUG

    @pytest.mark.unit()
    def test_configure_logging_invalid_level_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(service_name="test", log_level="INVALID")

    @pytest.mark.unit()
    def test_configure_logging_installs_single_json_handler(self) -> None:
        """Test that existing handlers are replaced by one JSON handler."""
        root_logger = logging.getLogger()
        dummy_handler = logging.StreamHandler()
        root_logger.addHandler(dummy_handler)

        configure_logging(service_name="secret_rotator")

        assert len(root_logger.handlers) == 1
        handler = root_logger.handlers[0]
        assert handler is not dummy_handler
        assert isinstance(handler.formatter, JSONFormatter)
        assert any(isinstance(f, TraceIDFilter) for f in handler.filters)


class TestGetLogger:
    """Test suite for get_logger."""

    @pytest.mark.unit()
    def test_get_logger_returns_named_logger(self) -> None:
        logger = get_logger("libs.rotation")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "libs.rotation"

    @pytest.mark.unit()
    def test_get_logger_none_returns_root(self) -> None:
        assert get_logger(None) is logging.getLogger()


class TestContextAdapter:
    """Test suite for ContextAdapter."""

    def setup_method(self) -> None:
        self.stream = StringIO()
        self.logger = logging.getLogger("test.context_adapter")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.logger.handlers.clear()

        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(JSONFormatter(service_name="test"))
        handler.addFilter(TraceIDFilter())
        self.logger.addHandler(handler)

    def teardown_method(self) -> None:
        self.logger.handlers.clear()
        self.logger.propagate = True

    def _lines(self) -> list[dict[str, object]]:
        return [json.loads(line) for line in self.stream.getvalue().splitlines()]

    @pytest.mark.unit()
    def test_fields_appear_in_context(self) -> None:
        log = ContextAdapter(self.logger, {"secret_id": "prod/db", "phase": "createSecret"})

        log.info("Evaluating rotation")

        (entry,) = self._lines()
        assert entry["context"] == {"secret_id": "prod/db", "phase": "createSecret"}

    @pytest.mark.unit()
    def test_call_site_context_is_merged(self) -> None:
        log = ContextAdapter(self.logger, {"secret_id": "prod/db"})

        log.info("Stored", extra={"context": {"version_id": "v2"}, "binary": False})

        (entry,) = self._lines()
        assert entry["context"] == {"secret_id": "prod/db", "version_id": "v2", "binary": False}

    @pytest.mark.unit()
    def test_with_context_does_not_mutate_parent(self) -> None:
        parent = ContextAdapter(self.logger, {"secret_id": "prod/db"})

        child = parent.with_context(phase="testSecret")

        assert parent.fields == {"secret_id": "prod/db"}
        assert child.fields == {"secret_id": "prod/db", "phase": "testSecret"}

    @pytest.mark.unit()
    def test_adapters_do_not_leak_between_calls(self) -> None:
        first = ContextAdapter(self.logger, {"secret_id": "a"})
        second = ContextAdapter(self.logger, {"secret_id": "b"})

        first.info("one")
        second.info("two")
        self.logger.info("plain")

        entries = self._lines()
        assert entries[0]["context"] == {"secret_id": "a"}
        assert entries[1]["context"] == {"secret_id": "b"}
        assert "context" not in entries[2]


class TestLogContext:
    """Test suite for LogContext."""

    def teardown_method(self) -> None:
        clear_trace_id()

    @pytest.mark.unit()
    def test_sets_and_restores_previous_trace_id(self) -> None:
        set_trace_id("outer")

        with LogContext("inner") as trace_id:
            assert trace_id == "inner"
            assert get_trace_id() == "inner"

        assert get_trace_id() == "outer"

    @pytest.mark.unit()
    def test_generates_trace_id_when_none_given(self) -> None:
        clear_trace_id()

        with LogContext(None) as trace_id:
            assert len(trace_id) == 36
            assert get_trace_id() == trace_id

        assert get_trace_id() is None

    @pytest.mark.unit()
    def test_restores_on_exception(self) -> None:
        clear_trace_id()

        with pytest.raises(RuntimeError), LogContext("req-1"):
            raise RuntimeError("boom")

        assert get_trace_id() is None
