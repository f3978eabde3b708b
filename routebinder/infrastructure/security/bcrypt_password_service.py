"""Bcrypt password hashing service (adapter).

Implements PasswordHashingProtocol with a configurable cost factor
(settings.bcrypt_rounds). Used by the users controller to store passwords
and by the OAuth model to check password grants.
"""

import bcrypt


class BcryptPasswordService:
    """Bcrypt password hashing service.

    Usage:
        password_service = BcryptPasswordService(cost_factor=settings.bcrypt_rounds)
        password_hash = password_service.hash_password("SecurePass123!")
        password_service.verify_password("SecurePass123!", password_hash)  # True
    """

    def __init__(self, cost_factor: int = 12) -> None:
        """Initialize bcrypt password service.

        Args:
            cost_factor: Bcrypt cost factor (4-31). Each +1 doubles hashing
                time; 12 is ~250ms. Low values are only for tests.

        Raises:
            ValueError: If cost_factor is outside bcrypt's supported range.
        """
        if not 4 <= cost_factor <= 31:
            msg = "Cost factor must be between 4 and 31"
            raise ValueError(msg)

        self._cost_factor = cost_factor

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password using bcrypt.

        Args:
            password: Plaintext password to hash.

        Returns:
            Hashed password string (bcrypt format: $2b$<cost>$...).
        """
        salt = bcrypt.gensalt(rounds=self._cost_factor)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify a plaintext password against a bcrypt hash.

        Returns False (never raises) for malformed hashes.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except (ValueError, AttributeError):
            return False
