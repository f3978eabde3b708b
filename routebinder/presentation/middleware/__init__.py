"""ASGI middleware."""

from routebinder.presentation.middleware.trace_middleware import (
    TraceMiddleware,
    get_trace_id,
)

__all__ = ["TraceMiddleware", "get_trace_id"]
