"""User domain entity.

Pure data with no infrastructure dependencies. Passwords are only ever
stored as bcrypt hashes.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID


@dataclass
class User:
    """Registered API user.

    Attributes:
        id: Unique user identifier (UUIDv7).
        username: Login name (unique, case-insensitive).
        password_hash: Bcrypt hash of the password.
        created_at: Timestamp when the user was created.
    """

    id: UUID
    username: str
    password_hash: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_public_dict(self) -> dict[str, Any]:
        """Serializable view safe to return to clients (no hash)."""
        return {
            "id": str(self.id),
            "username": self.username,
            "created_at": self.created_at.isoformat(),
        }
