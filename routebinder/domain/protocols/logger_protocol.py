"""LoggerProtocol definition for structured logging.

Every log call is a message plus key-value context. Implementations must
keep output structured and must never log secrets (passwords, bearer
tokens, client secrets).

Usage:
    from routebinder.core.container import get_logger

    logger = get_logger()
    logger.info("Route bound", method="POST", path="/v1/users")

    # Request-scoped logging
    request_logger = logger.bind(trace_id=trace_id, route=binding.route)
    request_logger.warning("Dispatch failed", status=400)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            error: Optional exception instance; implementations add
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message with optional exception details."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        The original logger is unchanged.

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
