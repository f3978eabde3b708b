"""Core error types.

Usage:
    from routebinder.core.errors import HttpError, to_http_error
"""

from routebinder.core.errors.configuration_error import (
    ContainerError,
    RouteConfigurationError,
)
from routebinder.core.errors.http_error import (
    ControllerResultError,
    DispatchTimeoutError,
    HttpError,
    to_http_error,
)

__all__ = [
    "ContainerError",
    "ControllerResultError",
    "DispatchTimeoutError",
    "HttpError",
    "RouteConfigurationError",
    "to_http_error",
]
