"""JSON log formatter for structured logging.

Example log output:
    {
        "timestamp": "2025-10-21T10:30:00.000Z",
        "level": "INFO",
        "service": "secret_rotator",
        "trace_id": "3e2f8c1a-...",
        "message": "Pending version stored",
        "context": {
            "secret_id": "prod/database/password",
            "phase": "createSecret",
            "request_token": "c0ffee"
        }
    }
"""

import json
import logging
import traceback
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

# LogRecord attributes that are never treated as context
_RESERVED_FIELDS = frozenset(
    {
        "name",
        "msg",
        "message",
        "asctime",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "trace_id",
        "context",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs logs as JSON.

    Formats log records into structured JSON with a consistent schema:
    timestamp, level, service name, trace ID, message, optional context,
    exception details and source location.

    Attributes:
        service_name: Name of the service emitting logs
        include_context: Whether to include extra context fields
    """

    def __init__(
        self, service_name: str, include_context: bool = True, *args: Any, **kwargs: Any
    ) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single JSON line."""
        log_entry: dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "service": self.service_name,
            "trace_id": getattr(record, "trace_id", None),
            "message": record.getMessage(),
        }

        if self.include_context:
            context = self._extract_context(record)
            if context:
                log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self._format_exception(record.exc_info),
            }

        log_entry["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_entry, default=str)

    def _format_timestamp(self, created: float) -> str:
        """Format timestamp as ISO 8601 in UTC with millisecond precision."""
        dt = datetime.fromtimestamp(created, tz=UTC)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def _extract_context(self, record: logging.LogRecord) -> dict[str, Any] | None:
        """Extract context from the record.

        An explicit ``context`` dict wins; otherwise every non-reserved extra
        attribute is collected.
        """
        context = getattr(record, "context", None)
        if context and isinstance(context, dict):
            return dict(context)

        extra = {
            key: value for key, value in record.__dict__.items() if key not in _RESERVED_FIELDS
        }
        return extra if extra else None

    def _format_exception(
        self,
        exc_info: tuple[type[BaseException] | None, BaseException | None, TracebackType | None],
    ) -> str:
        return "".join(traceback.format_exception(*exc_info))
