"""Controller base class.

Controllers are resolved once from the container and shared by every
request. They hold injected collaborators only; request-scoped state is
passed to each handler as a RequestContext.

Routed methods are declared in a ``routes`` table on the concrete class.
The helpers below live on the base class and are never routed.

Handler signature:
    async def handler(self, ctx: RequestContext, *path_values: str, body: dict)
        -> ControllerResult
"""

from http import HTTPStatus
from typing import Any, ClassVar, NoReturn

from routebinder.core.errors import HttpError
from routebinder.presentation.routing.metadata import RouteMetadata
from routebinder.presentation.routing.results import ControllerResult


class Controller:
    """Base class for routed controllers."""

    routes: ClassVar[list[RouteMetadata]] = []

    def ok(self, data: Any = None) -> ControllerResult:
        return ControllerResult(status=HTTPStatus.OK, data=data)

    def created(self, data: Any = None) -> ControllerResult:
        return ControllerResult(status=HTTPStatus.CREATED, data=data)

    def no_content(self) -> ControllerResult:
        return ControllerResult(status=HTTPStatus.NO_CONTENT)

    def bad_request(self, message: str) -> NoReturn:
        raise HttpError(message, status=HTTPStatus.BAD_REQUEST)

    def forbidden(self, message: str) -> NoReturn:
        raise HttpError(message, status=HTTPStatus.FORBIDDEN)

    def not_found(self, message: str) -> NoReturn:
        raise HttpError(message, status=HTTPStatus.NOT_FOUND)
