"""Fallback handlers: catch-all 404 and global error responders."""

from routebinder.presentation.errors.exception_handlers import (
    global_error_handler,
    http_exception_handler,
    not_found,
    register_exception_handlers,
    register_not_found_route,
)

__all__ = [
    "global_error_handler",
    "http_exception_handler",
    "not_found",
    "register_exception_handlers",
    "register_not_found_route",
]
