"""Centralized structured logging library.

This package provides structured JSON logging with trace ID support so every
log line of a rotation invocation can be correlated, and a per-call context
adapter that stamps the secret id and phase onto each record.

Usage:
    # At process startup (once per Lambda container)
    from libs.common.logging import configure_logging
    configure_logging(service_name="secret_rotator", log_level="INFO")

    # Per invocation
    from libs.common.logging import ContextAdapter, LogContext, get_logger
    with LogContext(context.aws_request_id):
        log = ContextAdapter(get_logger(__name__), {"secret_id": arn, "phase": "createSecret"})
        log.info("Evaluating rotation")
"""

from libs.common.logging.config import (
    ContextAdapter,
    TraceIDFilter,
    configure_logging,
    get_logger,
)
from libs.common.logging.context import (
    LogContext,
    clear_trace_id,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
)
from libs.common.logging.formatter import JSONFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "ContextAdapter",
    "TraceIDFilter",
    # Trace ID management
    "generate_trace_id",
    "get_trace_id",
    "set_trace_id",
    "clear_trace_id",
    "LogContext",
    # Formatter (for advanced usage)
    "JSONFormatter",
]
