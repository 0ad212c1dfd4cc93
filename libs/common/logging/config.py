"""Centralized logging configuration for the rotation executor.

This module provides standardized logging setup using structured JSON output
with trace ID support, plus a context adapter that attaches fixed fields
(secret id, phase, request token) to every record of one invocation.

Example:
    >>> from libs.common.logging.config import configure_logging
    >>> logger = configure_logging(service_name="secret_rotator", log_level="INFO")
    >>> logger.info("Rotator started", extra={"context": {"region": "us-east-1"}})
"""

import logging
import sys
from collections.abc import Mapping, MutableMapping
from typing import Any, Optional

from libs.common.logging.context import get_trace_id
from libs.common.logging.formatter import JSONFormatter


class TraceIDFilter(logging.Filter):
    """Logging filter that adds trace ID to log records.

    Automatically injects the current trace ID from context into every
    log record so it appears in the formatted output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add trace ID to the log record.

        Args:
            record: The log record to filter

        Returns:
            True (always allows the record through)
        """
        record.trace_id = get_trace_id()
        return True


class ContextAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter carrying an immutable per-call context.

    The adapter's fields are merged into ``extra["context"]`` of every record,
    together with any context passed at the call site (call-site keys win).
    The adapter never mutates the wrapped logger, so concurrent invocations
    sharing a module logger cannot see each other's fields.

    Example:
        >>> log = ContextAdapter(logger, {"secret_id": "prod/db", "phase": "testSecret"})
        >>> log.info("Pending version matched", extra={"context": {"version_id": "v2"}})
        # "context": {"secret_id": "prod/db", "phase": "testSecret", "version_id": "v2"}
    """

    def __init__(self, logger: logging.Logger, fields: Mapping[str, Any]) -> None:
        super().__init__(logger, dict(fields))

    @property
    def fields(self) -> dict[str, Any]:
        """Return a copy of the bound context fields."""
        return dict(self.extra or {})

    def with_context(self, **fields: Any) -> "ContextAdapter":
        """Return a new adapter with additional fields bound."""
        return ContextAdapter(self.logger, {**self.fields, **fields})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        call_context = extra.pop("context", None) or {}
        kwargs["extra"] = {"context": {**self.fields, **extra, **call_context}}
        return msg, kwargs


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    include_context: bool = True,
) -> logging.Logger:
    """Configure structured JSON logging for a service.

    Sets up the root logger with:
    - JSON formatted output to stdout
    - Trace ID injection on all records
    - Specified log level

    This should be called once per process (once per Lambda container).

    Args:
        service_name: Name of the service (e.g., "secret_rotator")
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        include_context: Whether to include context dict in output

    Returns:
        Configured root logger instance

    Raises:
        ValueError: If log_level is invalid
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates (the Lambda runtime installs one)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        JSONFormatter(
            service_name=service_name,
            include_context=include_context,
        )
    )
    handler.addFilter(TraceIDFilter())

    root_logger.addHandler(handler)

    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__). If None, returns root logger.

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
