"""OAuth2 error types (RFC 6749 section 5.2, RFC 6750 section 3.1).

Each error knows its HTTP status and wire code; the OAuth exception handler
renders them as ``{"error": code, "error_description": description}``.
"""

from http import HTTPStatus


class OAuthError(Exception):
    """Base OAuth2 error.

    Attributes:
        code: Wire error code (e.g. "invalid_token").
        description: Human-readable description.
        status: HTTP status code.
    """

    code: str = "server_error"
    status: int = HTTPStatus.SERVICE_UNAVAILABLE

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class InvalidRequestError(OAuthError):
    code = "invalid_request"
    status = HTTPStatus.BAD_REQUEST


class InvalidClientError(OAuthError):
    code = "invalid_client"
    status = HTTPStatus.UNAUTHORIZED


class InvalidGrantError(OAuthError):
    code = "invalid_grant"
    status = HTTPStatus.BAD_REQUEST


class UnauthorizedClientError(OAuthError):
    code = "unauthorized_client"
    status = HTTPStatus.BAD_REQUEST


class UnsupportedGrantTypeError(OAuthError):
    code = "unsupported_grant_type"
    status = HTTPStatus.BAD_REQUEST


class InvalidTokenError(OAuthError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED


class UnauthorizedRequestError(OAuthError):
    """Request carried no credentials at all."""

    code = "unauthorized_request"
    status = HTTPStatus.UNAUTHORIZED
