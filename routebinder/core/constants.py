"""Centralized constants for internal implementation details.

Values here are fixed by protocol or implementation, NOT environment
configuration. For environment-specific settings use
`routebinder/core/config.py`.

Categories:
- Token lengths: Sizes for opaque OAuth tokens
- Prefixes: Standard protocol prefixes
- Server-sent events: Response headers and frame defaults
- Body handling: Fields stripped before reaching controllers
"""

# =============================================================================
# Token Lengths
# =============================================================================

TOKEN_BYTES: int = 32
"""Number of bytes for opaque access/refresh tokens (32 bytes = 256 bits)."""


# =============================================================================
# Server-Sent Events
# =============================================================================

SSE_MEDIA_TYPE: str = "text/event-stream"
"""Content type of server-sent event streams."""

SSE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Content-Type": SSE_MEDIA_TYPE,
    "X-Accel-Buffering": "no",
}
"""Headers written before the first event frame.

X-Accel-Buffering disables proxy buffering so frames flush immediately.
"""

SSE_ERROR_EVENT: str = "error"
"""Event name used when a streaming handler fails after headers were sent."""


# =============================================================================
# Body Handling
# =============================================================================

ACCESS_TOKEN_FIELD: str = "access_token"
"""Body/query field carrying a bearer token; removed before controllers see the body."""

JSON_MEDIA_TYPE: str = "application/json"
"""Content type treated as a JSON request body."""

FORM_MEDIA_TYPES: tuple[str, ...] = (
    "application/x-www-form-urlencoded",
    "multipart/form-data",
)
"""Content types parsed as form bodies."""
