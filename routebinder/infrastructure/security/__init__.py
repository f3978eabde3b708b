"""Security adapters: password hashing and public key parsing."""

from routebinder.infrastructure.security.bcrypt_password_service import (
    BcryptPasswordService,
)
from routebinder.infrastructure.security.public_key_parser import (
    ParsedPublicKey,
    parse_public_key,
)

__all__ = ["BcryptPasswordService", "ParsedPublicKey", "parse_public_key"]
