"""Declarative route binding for controllers.

Usage:
    from routebinder.presentation.routing import HTTPMethod, RouteMetadata

    class DevicesController(Controller):
        routes = [
            RouteMetadata(method=HTTPMethod.GET, path="/v1/devices", handler="list"),
        ]
"""

from routebinder.infrastructure.uploads import UploadField
from routebinder.presentation.routing.context import EventStream, RequestContext
from routebinder.presentation.routing.metadata import (
    HTTPMethod,
    RouteBinding,
    RouteMetadata,
    parse_route,
)
from routebinder.presentation.routing.results import ControllerResult, coerce_result

__all__ = [
    "ControllerResult",
    "EventStream",
    "HTTPMethod",
    "RequestContext",
    "RouteBinding",
    "RouteMetadata",
    "UploadField",
    "coerce_result",
    "parse_route",
]
