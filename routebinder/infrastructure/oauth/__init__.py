"""OAuth2 capability: bearer authentication and the token endpoint.

Usage:
    oauth = OAuthServer(
        model=OAuthModel(user_repository, password_service, settings.oauth_clients),
        access_token_lifetime=settings.access_token_lifetime,
        refresh_token_lifetime=settings.refresh_token_lifetime,
        allow_bearer_tokens_in_query_string=True,
    )
    app.post(settings.login_route)(oauth.token())
    router.add_api_route(..., dependencies=[Depends(oauth.authenticate())])
"""

from routebinder.infrastructure.oauth.errors import OAuthError
from routebinder.infrastructure.oauth.model import (
    AccessToken,
    AuthContext,
    OAuthModel,
    TokenStore,
)
from routebinder.infrastructure.oauth.server import OAuthServer, oauth_error_handler

__all__ = [
    "AccessToken",
    "AuthContext",
    "OAuthError",
    "OAuthModel",
    "OAuthServer",
    "TokenStore",
    "oauth_error_handler",
]
