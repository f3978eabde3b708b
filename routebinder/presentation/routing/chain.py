"""Middleware chain builder.

Converts a RouteBinding into the ordered list of FastAPI route
dependencies that run before the dispatcher. FastAPI resolves route-level
dependencies in declaration order, and an exception raised by any stage
short-circuits the request, so the controller is never reached.

Stage order (fixed):
    1. bearer authentication (skipped for anonymous routes)
    2. server-sent events sink (server_sent_events routes)
    3. user injection (always)
    4. upload parsing (routes declaring allowed_uploads)

Disabled stages are replaced by pass_through so every chain has the same
shape.
"""

from collections.abc import Callable
from typing import Any

from fastapi import Depends, Request

from routebinder.infrastructure.oauth import OAuthServer
from routebinder.infrastructure.uploads import files_middleware
from routebinder.presentation.routing.context import EventStream
from routebinder.presentation.routing.metadata import RouteBinding

Stage = Callable[[Request], Any]


async def pass_through(request: Request) -> None:
    """Stage that does nothing."""
    return None


def maybe(stage: Stage, condition: bool) -> Any:
    """Return the stage as a dependency when condition holds, else pass_through."""
    return Depends(stage if condition else pass_through)


async def server_sent_events_stage(request: Request) -> EventStream:
    """Attach a fresh event stream sink to the request."""
    stream = EventStream()
    request.state.event_stream = stream
    return stream


async def inject_user_stage(request: Request) -> None:
    """Expose the authenticated user (or None) as ``request.state.user``."""
    oauth = getattr(request.state, "oauth", None)
    request.state.user = oauth.user if oauth is not None else None


def build_chain(binding: RouteBinding, oauth: OAuthServer) -> list[Any]:
    """Build the ordered dependency chain for one binding.

    Args:
        binding: Scanned route binding.
        oauth: OAuth server providing the bearer authentication stage.

    Returns:
        List of FastAPI dependencies in execution order.

    Examples:
        >>> # Anonymous JSON route
        >>> build_chain(binding, oauth)
        [Depends(pass_through), Depends(pass_through), Depends(inject_user_stage),
         Depends(pass_through)]
    """
    uploads = binding.allowed_uploads
    return [
        maybe(oauth.authenticate(), not binding.anonymous),
        maybe(server_sent_events_stage, binding.server_sent_events),
        Depends(inject_user_stage),
        maybe(files_middleware(uploads or ()), uploads is not None),
    ]
