"""Controller result type and coercion.

Handlers answer with a status and a JSON-serializable payload. Accepted
shapes:
    ControllerResult(status=200, data={...})
    {"status": 200, "data": {...}}
    Success(value=<either of the above>)
    Failure(error=<exception or message>)

Anything else, or a status outside 200-599, is a ControllerResultError (500).
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from routebinder.core.errors import ControllerResultError, HttpError
from routebinder.core.result import Failure, Success


@dataclass(frozen=True, slots=True)
class ControllerResult:
    """Status and payload returned by a controller method.

    Attributes:
        status: HTTP status code of the response.
        data: JSON-serializable payload.
    """

    status: int
    data: Any = None


def coerce_result(result: Any) -> ControllerResult:
    """Normalize a handler return value.

    Args:
        result: Value returned (or awaited) from the controller method.

    Returns:
        ControllerResult with an integer status in the 200-599 range.

    Raises:
        HttpError: For a Failure; exceptions are re-raised unchanged,
            other errors become a 400 HttpError.
        ControllerResultError: If the value has no usable status and data.
    """
    match result:
        case Success(value=value):
            return coerce_result(value)
        case Failure(error=BaseException() as error):
            raise error
        case Failure(error=error):
            raise HttpError(str(error))
        case ControllerResult():
            coerced = result
        case Mapping() if "status" in result and "data" in result:
            coerced = ControllerResult(status=result["status"], data=result["data"])
        case _:
            raise ControllerResultError()

    status = coerced.status
    if isinstance(status, bool) or not isinstance(status, int) or not 200 <= status <= 599:
        raise ControllerResultError(f"Controller returned an invalid status: {status!r}")
    return coerced
