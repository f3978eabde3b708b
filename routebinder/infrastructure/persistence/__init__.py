"""In-memory persistence adapters.

Usage:
    from routebinder.infrastructure.persistence import InMemoryUserRepository
"""

from routebinder.infrastructure.persistence.in_memory import (
    InMemoryDeviceKeyRepository,
    InMemoryDeviceRepository,
    InMemoryUserRepository,
)

__all__ = [
    "InMemoryDeviceKeyRepository",
    "InMemoryDeviceRepository",
    "InMemoryUserRepository",
]
