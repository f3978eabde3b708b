"""Route metadata types for controller route tables.

Each controller class declares a ``routes`` table of RouteMetadata entries,
one per routed method. The scanner turns those entries into RouteBinding
instances at startup; bindings are immutable for the process lifetime.

Core types:
    HTTPMethod: HTTP method enum
    RouteMetadata: Route declaration living next to the controller method
    RouteBinding: Scanned, validated binding registered with FastAPI
    UploadField: Accepted upload field (re-exported from the upload capability)

Usage:
    class ProvisioningController(Controller):
        routes = [
            RouteMetadata(
                method=HTTPMethod.POST,
                path="/v1/provisioning/:coreID",
                handler="provision",
            ),
        ]

        async def provision(self, ctx, core_id, body): ...
"""

import re
from dataclasses import dataclass
from enum import Enum

from routebinder.infrastructure.uploads import UploadField

# Express-style named parameter, e.g. ":coreID"
PARAMETER_PATTERN = re.compile(r":(\w*)")


# =============================================================================
# HTTP Method Enum
# =============================================================================


class HTTPMethod(str, Enum):
    """HTTP methods for controller routes."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


# =============================================================================
# Route declaration
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class RouteMetadata:
    """Route declaration for one controller method.

    Attributes:
        method: HTTP method.
        path: Path pattern with ``:name`` parameters (e.g. "/v1/devices/:deviceID").
        handler: Name of the method defined on the controller class.
        anonymous: Skip bearer authentication when True.
        allowed_uploads: Upload spec; empty tuple accepts any file field,
            None disables upload parsing.
        server_sent_events: Stream the response as server-sent events
            (never timed out).
        summary: Optional OpenAPI summary.
    """

    method: HTTPMethod
    path: str
    handler: str
    anonymous: bool = False
    allowed_uploads: tuple[UploadField, ...] | None = None
    server_sent_events: bool = False
    summary: str | None = None


# =============================================================================
# Route binding (scanner output)
# =============================================================================


def parse_route(route: str) -> tuple[str, tuple[str, ...]]:
    """Convert an express-style pattern to a FastAPI path.

    Args:
        route: Pattern such as "/v1/devices/:deviceID/keys".

    Returns:
        Tuple of (FastAPI path "/v1/devices/{deviceID}/keys", parameter
        names in order of appearance).

    Raises:
        ValueError: If the pattern is malformed.
    """
    if not route.startswith("/"):
        raise ValueError(f"route '{route}' must start with '/'")
    if "{" in route or "}" in route:
        raise ValueError(f"route '{route}' must use ':name' parameters, not braces")

    names = tuple(PARAMETER_PATTERN.findall(route))
    if any(not name.isidentifier() for name in names):
        raise ValueError(f"route '{route}' has an empty or invalid parameter name")
    duplicates = {name for name in names if names.count(name) > 1}
    if duplicates:
        raise ValueError(f"route '{route}' repeats parameters {sorted(duplicates)}")

    path = PARAMETER_PATTERN.sub(lambda match: "{" + match.group(1) + "}", route)
    return path, names


@dataclass(frozen=True, kw_only=True)
class RouteBinding:
    """A validated route bound to a controller method.

    Attributes:
        controller_name: Container identifier of the controller.
        handler_name: Method invoked on the controller.
        method: HTTP method.
        route: Original ``:name`` pattern.
        path: FastAPI path derived from route.
        parameter_names: Path parameters in pattern order; handler
            positional arguments follow this order.
        anonymous: Bearer authentication disabled.
        allowed_uploads: Upload spec or None.
        server_sent_events: Streaming route exempt from the timeout.
        summary: Optional OpenAPI summary.
    """

    controller_name: str
    handler_name: str
    method: HTTPMethod
    route: str
    path: str
    parameter_names: tuple[str, ...]
    anonymous: bool = False
    allowed_uploads: tuple[UploadField, ...] | None = None
    server_sent_events: bool = False
    summary: str | None = None

    @property
    def operation_id(self) -> str:
        return f"{self.controller_name}.{self.handler_name}"
