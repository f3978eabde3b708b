"""Infrastructure factories for the composition root.

Adapter selection is centralized here:
- Logging: ConsoleAdapter (console renderer in development, JSON in
  testing/ci/production)
- Password hashing: BcryptPasswordService with the configured cost factor
- OAuth: OAuthServer over OAuthModel and the user repository

Each factory takes the settings (or the container) explicitly so that
tests can build isolated applications with their own configuration.
"""

from typing import TYPE_CHECKING

from routebinder.core.config import Settings
from routebinder.core.enums import Environment

if TYPE_CHECKING:
    from routebinder.core.container.registry import Container
    from routebinder.domain.protocols import LoggerProtocol, PasswordHashingProtocol
    from routebinder.infrastructure.oauth import OAuthServer


def get_logger(settings: Settings) -> "LoggerProtocol":
    """Return the logger for the given settings.

    Args:
        settings: Application settings (environment and log level).

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from routebinder.infrastructure.logging import ConsoleAdapter

    use_json = settings.environment is not Environment.DEVELOPMENT
    level = "DEBUG" if settings.debug else settings.log_level
    return ConsoleAdapter(use_json=use_json, level=level)


def get_password_service(settings: Settings) -> "PasswordHashingProtocol":
    from routebinder.infrastructure.security import BcryptPasswordService

    return BcryptPasswordService(cost_factor=settings.bcrypt_rounds)


def get_oauth_server(container: "Container") -> "OAuthServer":
    """Build the OAuth server from registered services.

    Requires "Settings", "UserRepository" and "PasswordService" to be
    registered.
    """
    from routebinder.infrastructure.oauth import OAuthModel, OAuthServer

    settings: Settings = container.constitute("Settings")
    model = OAuthModel(
        user_repository=container.constitute("UserRepository"),
        password_service=container.constitute("PasswordService"),
        clients=settings.oauth_clients,
    )
    return OAuthServer(
        model,
        access_token_lifetime=settings.access_token_lifetime,
        refresh_token_lifetime=settings.refresh_token_lifetime,
        allow_bearer_tokens_in_query_string=settings.allow_bearer_tokens_in_query_string,
    )
