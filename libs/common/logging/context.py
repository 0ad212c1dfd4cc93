"""Trace ID generation and context propagation.

Every rotation invocation runs under one trace ID (the Lambda request id when
available) so all of its log lines can be grouped together. The trace ID is
held in a context variable, which keeps concurrent invocations isolated.

Example:
    >>> from libs.common.logging.context import LogContext, get_trace_id
    >>> with LogContext("8f1c-request"):
    ...     get_trace_id()
    '8f1c-request'
"""

import contextvars
import uuid
from types import TracebackType

_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)


def generate_trace_id() -> str:
    """Generate a new unique trace ID (UUID v4 string)."""
    return str(uuid.uuid4())


def get_trace_id() -> str | None:
    """Get the current trace ID from context, or None if unset."""
    return _trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Set the trace ID for the current context.

    Args:
        trace_id: The trace ID to set

    Raises:
        ValueError: If trace_id is empty or None
    """
    if not trace_id:
        raise ValueError("Trace ID cannot be empty")
    _trace_id_var.set(trace_id)


def clear_trace_id() -> None:
    """Clear the trace ID from the current context."""
    _trace_id_var.set(None)


class LogContext:
    """Context manager for scoped trace ID management.

    Sets a trace ID for a block of code and restores the previous value
    when done.

    Args:
        trace_id: The trace ID to set for this context. If None, generates new ID.

    Example:
        >>> with LogContext("request-123"):
        ...     print(get_trace_id())
        request-123
    """

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or generate_trace_id()
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> str:
        self._token = _trace_id_var.set(self.trace_id)
        return self.trace_id

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context and restore previous trace ID."""
        if self._token is not None:
            _trace_id_var.reset(self._token)
            self._token = None
