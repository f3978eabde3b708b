"""OAuth2 server exposing authenticate() and token().

authenticate() returns a FastAPI dependency that validates a bearer token
and stores an AuthContext on ``request.state.oauth``. token() returns the
endpoint implementing the password and refresh_token grants.

Errors are raised as OAuthError subclasses and rendered by
oauth_error_handler, which the application registers for OAuthError.

Bearer token sources (RFC 6750 section 2), at most one per request:
    - Authorization: Bearer <token>
    - access_token query parameter (when allowed)
    - access_token field of an application/x-www-form-urlencoded body
"""

import base64
import binascii
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer

from routebinder.core.constants import ACCESS_TOKEN_FIELD
from routebinder.infrastructure.oauth.errors import (
    InvalidClientError,
    InvalidGrantError,
    InvalidRequestError,
    InvalidTokenError,
    OAuthError,
    UnauthorizedClientError,
    UnauthorizedRequestError,
    UnsupportedGrantTypeError,
)
from routebinder.infrastructure.oauth.model import AccessToken, AuthContext, OAuthModel

FORM_URLENCODED = "application/x-www-form-urlencoded"

# Authorization header extractor (scheme matched case-insensitively)
# auto_error=False returns None instead of raising 403
bearer_scheme = HTTPBearer(auto_error=False)


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


class OAuthServer:
    """Bearer authentication and token issuance.

    Args:
        model: Client/user/token model.
        access_token_lifetime: Access token lifetime in seconds.
        refresh_token_lifetime: Refresh token lifetime in seconds.
        allow_bearer_tokens_in_query_string: Accept ?access_token=...
    """

    def __init__(
        self,
        model: OAuthModel,
        *,
        access_token_lifetime: int,
        refresh_token_lifetime: int,
        allow_bearer_tokens_in_query_string: bool = False,
    ) -> None:
        self.model = model
        self._access_token_lifetime = access_token_lifetime
        self._refresh_token_lifetime = refresh_token_lifetime
        self._allow_query = allow_bearer_tokens_in_query_string

    # =========================================================================
    # Resource protection
    # =========================================================================

    def authenticate(self) -> Callable[[Request], Awaitable[AuthContext]]:
        """Build the bearer authentication dependency.

        Returns:
            Async dependency that raises OAuthError when the request is not
            authenticated and otherwise returns (and stores) the AuthContext.
        """

        async def authenticate(request: Request) -> AuthContext:
            raw_token = await self._extract_bearer_token(request)
            token = self.model.get_access_token(raw_token)
            if token is None:
                raise InvalidTokenError("Invalid token: access token is invalid")
            if token.is_expired():
                raise InvalidTokenError("Invalid token: access token has expired")

            user = await self.model.get_user_by_id(token.user_id)
            if user is None:
                raise InvalidTokenError("Invalid token: user no longer exists")

            context = AuthContext(token=token, user=user)
            request.state.oauth = context
            return context

        return authenticate

    async def _extract_bearer_token(self, request: Request) -> str:
        candidates: list[str] = []

        if request.headers.get("authorization"):
            credentials = await bearer_scheme(request)
            if credentials is None:
                raise InvalidRequestError(
                    "Invalid request: malformed authorization header"
                )
            candidates.append(credentials.credentials)

        query_token = request.query_params.get(ACCESS_TOKEN_FIELD)
        if query_token is not None:
            if not self._allow_query:
                raise InvalidRequestError(
                    "Invalid request: do not send bearer tokens in query URLs"
                )
            candidates.append(query_token)

        if request.method not in ("GET", "HEAD") and _media_type(request) == FORM_URLENCODED:
            form = await request.form()
            body_token = form.get(ACCESS_TOKEN_FIELD)
            if isinstance(body_token, str):
                candidates.append(body_token)

        if len(candidates) > 1:
            raise InvalidRequestError(
                "Invalid request: only one authentication method is allowed"
            )
        if not candidates or not candidates[0]:
            raise UnauthorizedRequestError("Unauthorized request: no authentication given")
        return candidates[0]

    # =========================================================================
    # Token endpoint
    # =========================================================================

    def token(self) -> Callable[[Request], Awaitable[JSONResponse]]:
        """Build the token (login) endpoint.

        Supports grant_type=password and grant_type=refresh_token. Client
        credentials come from the form body or HTTP Basic authentication.
        """

        async def token(request: Request) -> JSONResponse:
            if request.method != "POST":
                raise InvalidRequestError("Invalid request: method must be POST")
            if _media_type(request) != FORM_URLENCODED:
                raise InvalidRequestError(
                    f"Invalid request: content must be {FORM_URLENCODED}"
                )

            form = await request.form()
            fields = {key: value for key, value in form.items() if isinstance(value, str)}

            client_id, client_secret = self._client_credentials(request, fields)
            client = self.model.get_client(client_id, client_secret)
            if client is None:
                raise InvalidClientError("Invalid client: client is invalid")

            grant_type = fields.get("grant_type")
            if not grant_type:
                raise InvalidRequestError("Missing parameter: `grant_type`")
            if grant_type not in ("password", "refresh_token"):
                raise UnsupportedGrantTypeError(
                    "Unsupported grant type: `grant_type` is invalid"
                )
            if grant_type not in client.grants:
                raise UnauthorizedClientError(
                    "Unauthorized client: `grant_type` is invalid"
                )

            if grant_type == "password":
                token = await self._password_grant(client.client_id, fields)
            else:
                token = self._refresh_token_grant(client.client_id, fields)

            return JSONResponse(
                content={
                    "access_token": token.access_token,
                    "token_type": "Bearer",
                    "expires_in": self._access_token_lifetime,
                    "refresh_token": token.refresh_token,
                },
                headers={"Cache-Control": "no-store", "Pragma": "no-cache"},
            )

        return token

    def _client_credentials(
        self, request: Request, fields: dict[str, str]
    ) -> tuple[str, str]:
        authorization = request.headers.get("authorization", "")
        if authorization.startswith("Basic "):
            try:
                decoded = base64.b64decode(authorization[6:], validate=True).decode()
            except (binascii.Error, UnicodeDecodeError) as e:
                raise InvalidClientError(
                    "Invalid client: cannot decode basic credentials"
                ) from e
            client_id, separator, client_secret = decoded.partition(":")
            if separator:
                return client_id, client_secret

        client_id = fields.get("client_id")
        client_secret = fields.get("client_secret")
        if not client_id or not client_secret:
            raise InvalidClientError("Invalid client: cannot retrieve client credentials")
        return client_id, client_secret

    async def _password_grant(self, client_id: str, fields: dict[str, str]) -> AccessToken:
        username = fields.get("username")
        password = fields.get("password")
        if not username:
            raise InvalidRequestError("Missing parameter: `username`")
        if not password:
            raise InvalidRequestError("Missing parameter: `password`")

        user = await self.model.get_user(username, password)
        if user is None:
            raise InvalidGrantError("Invalid grant: user credentials are invalid")

        return self.model.issue_token(
            client_id=client_id,
            user_id=user.id,
            access_token_lifetime=self._access_token_lifetime,
            refresh_token_lifetime=self._refresh_token_lifetime,
        )

    def _refresh_token_grant(self, client_id: str, fields: dict[str, str]) -> AccessToken:
        refresh_token = fields.get("refresh_token")
        if not refresh_token:
            raise InvalidRequestError("Missing parameter: `refresh_token`")

        existing = self.model.get_refresh_token(refresh_token)
        if existing is None or existing.client_id != client_id:
            raise InvalidGrantError("Invalid grant: refresh token is invalid")
        if existing.is_refresh_expired():
            raise InvalidGrantError("Invalid grant: refresh token has expired")

        self.model.revoke_token(existing)
        return self.model.issue_token(
            client_id=client_id,
            user_id=existing.user_id,
            access_token_lifetime=self._access_token_lifetime,
            refresh_token_lifetime=self._refresh_token_lifetime,
        )


async def oauth_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render OAuthError as an RFC 6749/6750 error response.

    401 responses carry a WWW-Authenticate challenge.
    """
    assert isinstance(exc, OAuthError)

    headers: dict[str, str] = {"Cache-Control": "no-store", "Pragma": "no-cache"}
    if exc.status == 401:
        challenge = 'Bearer realm="Service"'
        if not isinstance(exc, UnauthorizedRequestError):
            challenge += f', error="{exc.code}", error_description="{exc.description}"'
        headers["WWW-Authenticate"] = challenge

    content: dict[str, Any] = {"error": exc.code, "error_description": exc.description}
    return JSONResponse(status_code=exc.status, content=content, headers=headers)
