"""HTTP error type and the single exception-to-HTTP mapping.

HttpError is the tagged error controllers raise for expected failures. Any
other exception reaching the dispatcher is folded into an HttpError by
to_http_error(), which is the only place that decides a failure's status.

Mapping (first match wins):
    HttpError                       -> unchanged
    TimeoutError                    -> DispatchTimeoutError (504)
    starlette HTTPException         -> status_code, detail
    int ``status``/``status_code``  -> that status (4xx/5xx only), str(exc)
    anything else                   -> 500, generic message

Usage:
    from routebinder.core.errors import HttpError, to_http_error

    raise HttpError("No key provided")           # 400
    raise HttpError("Device not found", status=404)

    error = to_http_error(exc)
    body = {"error": error.message, "ok": False}
"""

from http import HTTPStatus

from starlette.exceptions import HTTPException

DEFAULT_ERROR_MESSAGE = HTTPStatus.INTERNAL_SERVER_ERROR.phrase


class HttpError(Exception):
    """Error carrying an explicit HTTP status and client-safe message.

    Attributes:
        status: HTTP status code (defaults to 400 Bad Request).
        message: Message returned to the client in the ``error`` field.
    """

    def __init__(self, message: str, *, status: int = HTTPStatus.BAD_REQUEST) -> None:
        super().__init__(message)
        self.status = int(status)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class DispatchTimeoutError(HttpError):
    """Controller did not settle before the configured API timeout."""

    def __init__(self, message: str = "timeout") -> None:
        super().__init__(message, status=HTTPStatus.GATEWAY_TIMEOUT)


class ControllerResultError(HttpError):
    """Controller returned something other than a {status, data} result."""

    def __init__(self, message: str = "Controller returned a malformed result") -> None:
        super().__init__(message, status=HTTPStatus.INTERNAL_SERVER_ERROR)


def _carried_status(error: BaseException) -> int | None:
    for attribute in ("status", "status_code"):
        value = getattr(error, attribute, None)
        if isinstance(value, int) and not isinstance(value, bool) and 400 <= value <= 599:
            return value
    return None


def to_http_error(error: BaseException, *, expose_details: bool = False) -> HttpError:
    """Map any raised value to an HttpError.

    Args:
        error: Exception raised (or failure carried) during dispatch.
        expose_details: Use str(error) as the message for unrecognized
            errors instead of the generic message.

    Returns:
        HttpError with the preserved or defaulted status.
    """
    if isinstance(error, HttpError):
        return error

    if isinstance(error, TimeoutError):
        return DispatchTimeoutError()

    if isinstance(error, HTTPException):
        return HttpError(str(error.detail), status=error.status_code)

    status = _carried_status(error)
    if status is not None:
        return HttpError(str(error) or HTTPStatus(status).phrase, status=status)

    message = str(error) if expose_details and str(error) else DEFAULT_ERROR_MESSAGE
    return HttpError(message, status=HTTPStatus.INTERNAL_SERVER_ERROR)
