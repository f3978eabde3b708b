"""PasswordHashingProtocol definition."""

from typing import Protocol


class PasswordHashingProtocol(Protocol):
    """Hash and verify user passwords."""

    def hash_password(self, password: str) -> str:
        """Return a salted hash of the plaintext password."""
        ...

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Return True when password matches password_hash."""
        ...
