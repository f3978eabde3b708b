"""Repository protocols.

All repository methods are async so that adapters backed by real storage
can be swapped in without touching controllers.
"""

from typing import Protocol
from uuid import UUID

from routebinder.domain.entities import Device, DeviceKey, User


class UserRepository(Protocol):
    """Persistence for users."""

    async def create(self, username: str, password_hash: str) -> User: ...

    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def get_by_username(self, username: str) -> User | None: ...

    async def delete_by_id(self, user_id: UUID) -> None: ...


class DeviceRepository(Protocol):
    """Persistence for device attributes."""

    async def get_by_id(self, device_id: str) -> Device | None: ...

    async def list_by_owner(self, owner_id: UUID) -> list[Device]: ...

    async def save(self, device: Device) -> Device: ...

    async def delete_by_id(self, device_id: str) -> None: ...


class DeviceKeyRepository(Protocol):
    """Persistence for device public keys."""

    async def get_by_device_id(self, device_id: str) -> DeviceKey | None: ...

    async def save(self, key: DeviceKey) -> DeviceKey: ...

    async def delete(self, device_id: str) -> None: ...
