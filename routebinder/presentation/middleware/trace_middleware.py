"""Trace middleware to inject a trace_id per request.

- Reuses an inbound X-Trace-Id header or generates a UUIDv7
- Binds trace_id into structlog context so every log line carries it
- Adds X-Trace-Id response header
"""

from __future__ import annotations

from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from uuid_extensions import uuid7

TRACE_HEADER = "X-Trace-Id"


def get_trace_id() -> str | None:
    """Return the current trace ID, or None outside of a request."""
    return structlog.contextvars.get_contextvars().get("trace_id")


class TraceMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that injects a trace ID into each request context."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Intercept a request to set and propagate a trace ID.

        Args:
            request (Request): Incoming request.
            call_next (Callable[[Request], Awaitable[Response]]): Next handler.

        Returns:
            Response: Response with X-Trace-Id header added.
        """
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid7())
        request.state.trace_id = trace_id
        tokens = structlog.contextvars.bind_contextvars(trace_id=trace_id)
        try:
            response = await call_next(request)
            response.headers[TRACE_HEADER] = trace_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)
