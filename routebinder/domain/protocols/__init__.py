"""Domain protocols (structural interfaces for adapters).

Usage:
    from routebinder.domain.protocols import LoggerProtocol, UserRepository
"""

from routebinder.domain.protocols.logger_protocol import LoggerProtocol
from routebinder.domain.protocols.password_hashing_protocol import (
    PasswordHashingProtocol,
)
from routebinder.domain.protocols.repositories import (
    DeviceKeyRepository,
    DeviceRepository,
    UserRepository,
)

__all__ = [
    "DeviceKeyRepository",
    "DeviceRepository",
    "LoggerProtocol",
    "PasswordHashingProtocol",
    "UserRepository",
]
