"""
Main FastAPI application entry point.

create_app() builds the container, binds the controller routes and wires
the trace middleware. Tests build isolated applications with their own
settings, container or controller set; ``app`` is the default instance for
ASGI servers (``uvicorn routebinder.main:app``).
"""

from collections.abc import Iterable

from fastapi import FastAPI

from routebinder.core.config import Settings, get_settings
from routebinder.core.container import CONTROLLER_NAMES, Container, build_container
from routebinder.presentation.middleware import TraceMiddleware
from routebinder.presentation.routing.binder import bind_routes


def create_app(
    settings: Settings | None = None,
    container: Container | None = None,
    controllers: Iterable[str] | None = None,
) -> FastAPI:
    """Create the application.

    Args:
        settings: Settings to use (defaults to get_settings()); ignored when
            a container is given.
        container: Pre-built container (defaults to build_container()).
        controllers: Controller names to bind (defaults to CONTROLLER_NAMES).

    Returns:
        FastAPI application with every route bound.

    Raises:
        RouteConfigurationError: If a controller route table is invalid.
    """
    container = container or build_container(settings or get_settings())
    settings = container.constitute("Settings")

    app = FastAPI(
        title=settings.app_name,
        description="Declarative controller route binding",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Wire trace middleware (request correlation)
    app.add_middleware(TraceMiddleware)

    bind_routes(app, container, CONTROLLER_NAMES if controllers is None else controllers)
    return app


app = create_app()
