"""Fallback handlers for FastAPI application.

Requests that never reach a dispatcher, or errors raised by chain stages,
end up here. Every response body uses the dispatcher's error shape
``{"error": ..., "ok": false}`` except OAuth errors, which keep the
RFC 6749 ``{error, error_description}`` shape.

Handlers:
    not_found: Catch-all route for unmatched path or verb (empty 404)
    http_exception_handler: HTTPException raised by framework internals
    global_error_handler: Any other escaped exception (400)

Exports:
    register_exception_handlers: Register all exception handlers with FastAPI app
    register_not_found_route: Register the catch-all route (must run last)
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException

from routebinder.infrastructure.oauth import OAuthError, oauth_error_handler
from routebinder.infrastructure.uploads import UploadError

CATCH_ALL_PATH = "/{path:path}"


async def not_found(request: Request) -> Response:
    """Answer an unmatched request with 404 and an empty body."""
    return Response(status_code=404)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Convert HTTPException to the error response shape.

    Headers carried by the exception (e.g. Allow) are preserved.
    """
    # Type narrowing: FastAPI registers this handler only for HTTPException
    assert isinstance(exc, HTTPException)

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "ok": False},
        headers=getattr(exc, "headers", None),
    )


async def global_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort responder for errors raised outside the dispatcher.

    Answers 400 with the error's machine-readable ``code`` when it has one
    (e.g. upload limit violations), else its message.

    Args:
        request: FastAPI Request object.
        exc: Escaped exception.

    Returns:
        JSONResponse ``{"error": code or message, "ok": false}`` (400).

    Example:
        >>> # Upload stage rejects an undeclared file field:
        >>> raise UploadError("LIMIT_UNEXPECTED_FILE", "Unexpected field: x", field="x")
        >>> # Returns 400 {"error": "LIMIT_UNEXPECTED_FILE", "ok": false}
    """
    logger = getattr(request.app.state, "logger", None)
    if logger is not None:
        logger.warning(
            "Unhandled error",
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )

    code = getattr(exc, "code", None)
    return JSONResponse(
        status_code=400,
        content={"error": code or str(exc), "ok": False},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Bearer authentication and token endpoint errors keep the OAuth shape
    app.add_exception_handler(OAuthError, oauth_error_handler)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(UploadError, global_error_handler)

    # Catch-all for anything else that escaped
    app.add_exception_handler(Exception, global_error_handler)


def register_not_found_route(app: FastAPI) -> None:
    """Register the catch-all 404 route.

    Starlette matches routes in registration order, so this must be called
    after every other route has been added.
    """
    # No method list: a plain Starlette route matches every method
    app.add_route(CATCH_ALL_PATH, not_found, include_in_schema=False)
