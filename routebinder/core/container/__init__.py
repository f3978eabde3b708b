"""Container module - name-based dependency injection.

The container is organized into modules:
- registry: Container and Lifetime
- infrastructure: Adapter factories (logging, password hashing, OAuth)
- application: build_container() composition root

Usage:
    from routebinder.core.container import build_container

    container = build_container(settings)
    controller = container.constitute("UsersController")
"""

from routebinder.core.container.registry import Container, Lifetime
from routebinder.core.container.infrastructure import (
    get_logger,
    get_oauth_server,
    get_password_service,
)
from routebinder.core.container.application import CONTROLLER_NAMES, build_container

__all__ = [
    "CONTROLLER_NAMES",
    "Container",
    "Lifetime",
    "build_container",
    "get_logger",
    "get_oauth_server",
    "get_password_service",
]
