"""Users controller: registration and the current user."""

from http import HTTPStatus
from typing import Any

from routebinder.core.errors import HttpError
from routebinder.domain.protocols import (
    LoggerProtocol,
    PasswordHashingProtocol,
    UserRepository,
)
from routebinder.presentation.controllers.base import Controller
from routebinder.presentation.routing import (
    ControllerResult,
    HTTPMethod,
    RequestContext,
    RouteMetadata,
)

MIN_PASSWORD_LENGTH = 8


class UsersController(Controller):
    """Create users and read the authenticated user."""

    routes = [
        RouteMetadata(
            method=HTTPMethod.POST,
            path="/v1/users",
            handler="create",
            anonymous=True,
            summary="Register a user",
        ),
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/v1/users/me",
            handler="me",
            summary="Get the current user",
        ),
    ]

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._users = user_repository
        self._passwords = password_service
        self._logger = logger

    async def create(self, ctx: RequestContext, body: dict[str, Any]) -> ControllerResult:
        """Register a user from ``{username, password}``."""
        username = body.get("username")
        password = body.get("password")
        if not isinstance(username, str) or not username.strip():
            self.bad_request("Username is required")
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            self.bad_request(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        username = username.strip()
        if await self._users.get_by_username(username) is not None:
            raise HttpError("Username already exists", status=HTTPStatus.CONFLICT)

        user = await self._users.create(
            username=username,
            password_hash=self._passwords.hash_password(password),
        )
        self._logger.info("User registered", user_id=str(user.id))
        return self.created(user.to_public_dict())

    async def me(self, ctx: RequestContext, body: dict[str, Any]) -> ControllerResult:
        return self.ok(ctx.current_user.to_public_dict())
