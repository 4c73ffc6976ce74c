"""LoggerProtocol definition for structured logging.

Backend-agnostic port for structured logs: a short message plus key-value
context. Implementations must never receive secrets (tokens, passwords).

Usage:
    from trends_api.core.container import get_logger

    logger = get_logger()
    logger.warning("Rate limit exceeded", ip=ip, route=route)

    request_logger = logger.bind(request_id=request_id)
    request_logger.info("Request admitted")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Supports the standard levels (DEBUG, INFO, WARNING, ERROR) and context
    binding for request-scoped logging.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message.

        Admission denials and misconfigured policies are logged here.
        """
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged.
        """
        ...
