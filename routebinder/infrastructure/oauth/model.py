"""OAuth model: client lookup, user lookup and token persistence.

The model is the pluggable part of the OAuth capability. This
implementation checks clients against settings.oauth_clients, users against
the UserRepository (bcrypt passwords) and keeps issued tokens in an
in-memory TokenStore.
"""

import secrets
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from routebinder.core.config import OAuthClient
from routebinder.core.constants import TOKEN_BYTES
from routebinder.domain.entities import User
from routebinder.domain.protocols import PasswordHashingProtocol, UserRepository


@dataclass(frozen=True, slots=True, kw_only=True)
class AccessToken:
    """Issued token pair.

    Attributes:
        access_token: Opaque bearer token.
        access_token_expires_at: Expiry of the bearer token.
        refresh_token: Opaque refresh token.
        refresh_token_expires_at: Expiry of the refresh token.
        client_id: Client the token was issued to.
        user_id: User the token authenticates.
    """

    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime
    client_id: str
    user_id: UUID

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.access_token_expires_at

    def is_refresh_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) >= self.refresh_token_expires_at


@dataclass(frozen=True, slots=True, kw_only=True)
class AuthContext:
    """Result of a successful bearer authentication (one request only).

    Attributes:
        token: The validated token.
        user: The user the token belongs to.
    """

    token: AccessToken
    user: User


class TokenStore:
    """In-memory index of issued tokens by access and refresh token.

    Expired entries are dropped when a lookup finds them and swept on every
    save. A lookup still returns the expired token once so the caller can
    tell an expired token from an unknown one.
    """

    def __init__(self) -> None:
        self._by_access: dict[str, AccessToken] = {}
        self._by_refresh: dict[str, AccessToken] = {}

    def save(self, token: AccessToken) -> None:
        self.prune()
        self._by_access[token.access_token] = token
        self._by_refresh[token.refresh_token] = token

    def get_by_access_token(self, access_token: str) -> AccessToken | None:
        token = self._by_access.get(access_token)
        if token is not None and token.is_expired():
            del self._by_access[access_token]
        return token

    def get_by_refresh_token(self, refresh_token: str) -> AccessToken | None:
        token = self._by_refresh.get(refresh_token)
        if token is not None and token.is_refresh_expired():
            self.revoke(token)
        return token

    def prune(self, now: datetime | None = None) -> None:
        """Drop expired access tokens and expired refresh tokens."""
        now = now or datetime.now(UTC)
        for key in [k for k, t in self._by_access.items() if t.is_expired(now)]:
            del self._by_access[key]
        for key in [k for k, t in self._by_refresh.items() if t.is_refresh_expired(now)]:
            del self._by_refresh[key]

    def revoke(self, token: AccessToken) -> None:
        self._by_access.pop(token.access_token, None)
        self._by_refresh.pop(token.refresh_token, None)

    def revoke_user(self, user_id: UUID) -> None:
        tokens = {*self._by_access.values(), *self._by_refresh.values()}
        for token in [t for t in tokens if t.user_id == user_id]:
            self.revoke(token)

    def __len__(self) -> int:
        return len({*self._by_access.values(), *self._by_refresh.values()})


class OAuthModel:
    """OAuth model backed by the user repository.

    Args:
        user_repository: Lookup for password grants and token owners.
        password_service: Verifies submitted passwords.
        clients: Registered OAuth clients.
        token_store: Token persistence (a fresh in-memory store by default).
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_service: PasswordHashingProtocol,
        clients: Sequence[OAuthClient],
        token_store: TokenStore | None = None,
    ) -> None:
        self._users = user_repository
        self._passwords = password_service
        self._clients = {client.client_id: client for client in clients}
        self._tokens = token_store if token_store is not None else TokenStore()

    def get_client(self, client_id: str, client_secret: str) -> OAuthClient | None:
        client = self._clients.get(client_id)
        if client is None or not secrets.compare_digest(
            client.client_secret.encode(), client_secret.encode()
        ):
            return None
        return client

    async def get_user(self, username: str, password: str) -> User | None:
        user = await self._users.get_by_username(username)
        if user is None or not self._passwords.verify_password(password, user.password_hash):
            return None
        return user

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        return await self._users.get_by_id(user_id)

    def issue_token(
        self,
        *,
        client_id: str,
        user_id: UUID,
        access_token_lifetime: int,
        refresh_token_lifetime: int,
    ) -> AccessToken:
        """Generate and store a new token pair."""
        now = datetime.now(UTC)
        token = AccessToken(
            access_token=secrets.token_hex(TOKEN_BYTES),
            access_token_expires_at=now + timedelta(seconds=access_token_lifetime),
            refresh_token=secrets.token_hex(TOKEN_BYTES),
            refresh_token_expires_at=now + timedelta(seconds=refresh_token_lifetime),
            client_id=client_id,
            user_id=user_id,
        )
        self._tokens.save(token)
        return token

    def get_access_token(self, access_token: str) -> AccessToken | None:
        return self._tokens.get_by_access_token(access_token)

    def get_refresh_token(self, refresh_token: str) -> AccessToken | None:
        return self._tokens.get_by_refresh_token(refresh_token)

    def revoke_token(self, token: AccessToken) -> None:
        self._tokens.revoke(token)

    def revoke_user_tokens(self, user_id: UUID) -> None:
        self._tokens.revoke_user(user_id)
