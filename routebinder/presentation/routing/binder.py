"""Route binder: registers scanned controller routes with FastAPI.

bind_routes() is the startup entry point. It scans the controllers,
mounts the OAuth token endpoint, adds one FastAPI route per binding
(middleware chain as route dependencies, dispatcher as endpoint body),
then installs the fallback handlers. The catch-all 404 route is added
last so it never shadows a bound route.

Usage:
    app = FastAPI()
    container = build_container(settings)
    bind_routes(app, container, CONTROLLER_NAMES)
"""

from collections.abc import Awaitable, Callable, Iterable

from fastapi import FastAPI, Request, Response

from routebinder.core.config import Settings
from routebinder.core.container import Container
from routebinder.domain.protocols import LoggerProtocol
from routebinder.infrastructure.oauth import OAuthServer
from routebinder.presentation.errors import (
    register_exception_handlers,
    register_not_found_route,
)
from routebinder.presentation.routing.chain import build_chain
from routebinder.presentation.routing.dispatcher import Dispatcher
from routebinder.presentation.routing.metadata import RouteBinding
from routebinder.presentation.routing.scanner import scan_controllers

Endpoint = Callable[[Request, Response], Awaitable[Response]]


def bind_routes(
    app: FastAPI,
    container: Container,
    controller_names: Iterable[str],
) -> list[RouteBinding]:
    """Bind every controller route and the fallback handlers.

    Requires "Settings", "Logger", "OAuthServer" and "Dispatcher" to be
    registered in the container.

    Args:
        app: FastAPI application to register routes on.
        container: Container resolving controllers and services.
        controller_names: Controllers to scan, in order.

    Returns:
        The bindings that were registered.

    Raises:
        RouteConfigurationError: If any route table is invalid.
    """
    settings: Settings = container.constitute("Settings")
    logger: LoggerProtocol = container.constitute("Logger")
    oauth: OAuthServer = container.constitute("OAuthServer")
    dispatcher: Dispatcher = container.constitute("Dispatcher")

    app.state.container = container
    app.state.logger = logger

    bindings = scan_controllers(container, controller_names, logger)

    app.add_api_route(
        settings.login_route,
        oauth.token(),
        methods=["POST"],
        summary="Issue an access token",
        operation_id="oauth.token",
    )

    for binding in bindings:
        app.add_api_route(
            binding.path,
            _endpoint(dispatcher, binding),
            methods=[binding.method.value],
            dependencies=build_chain(binding, oauth),
            summary=binding.summary,
            operation_id=binding.operation_id,
            response_model=None,
        )
        logger.info(
            "Route bound",
            method=binding.method.value,
            route=binding.route,
            handler=binding.operation_id,
            anonymous=binding.anonymous,
        )

    register_exception_handlers(app)
    register_not_found_route(app)
    return bindings


def _endpoint(dispatcher: Dispatcher, binding: RouteBinding) -> Endpoint:
    async def endpoint(request: Request, response: Response) -> Response:
        return await dispatcher.dispatch(binding, request, response)

    endpoint.__name__ = binding.operation_id.replace(".", "_")
    return endpoint
