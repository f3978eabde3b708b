"""In-memory repository adapters.

Process-local storage implementing the repository protocols structurally.
State lives for the lifetime of the container that owns the repository,
which is the lifetime of one application instance.
"""

from dataclasses import replace
from uuid import UUID

from uuid_extensions import uuid7

from routebinder.domain.entities import Device, DeviceKey, User


class InMemoryUserRepository:
    """Users keyed by id, with a case-insensitive username index."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}
        self._by_username: dict[str, UUID] = {}

    async def create(self, username: str, password_hash: str) -> User:
        """Store a new user.

        Raises:
            ValueError: If the username is already taken.
        """
        key = username.casefold()
        if key in self._by_username:
            raise ValueError(f"Username '{username}' already exists")

        user = User(id=uuid7(), username=username, password_hash=password_hash)
        self._users[user.id] = user
        self._by_username[key] = user.id
        return user

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> User | None:
        user_id = self._by_username.get(username.casefold())
        return self._users.get(user_id) if user_id else None

    async def delete_by_id(self, user_id: UUID) -> None:
        user = self._users.pop(user_id, None)
        if user is not None:
            self._by_username.pop(user.username.casefold(), None)


class InMemoryDeviceRepository:
    """Device attributes keyed by device id."""

    def __init__(self) -> None:
        self._devices: dict[str, Device] = {}

    async def get_by_id(self, device_id: str) -> Device | None:
        return self._devices.get(device_id)

    async def list_by_owner(self, owner_id: UUID) -> list[Device]:
        return [device for device in self._devices.values() if device.owner_id == owner_id]

    async def save(self, device: Device) -> Device:
        # Store a copy so callers cannot mutate persisted state in place
        stored = replace(device)
        self._devices[device.id] = stored
        return replace(stored)

    async def delete_by_id(self, device_id: str) -> None:
        self._devices.pop(device_id, None)


class InMemoryDeviceKeyRepository:
    """Device public keys keyed by device id."""

    def __init__(self) -> None:
        self._keys: dict[str, DeviceKey] = {}

    async def get_by_device_id(self, device_id: str) -> DeviceKey | None:
        return self._keys.get(device_id)

    async def save(self, key: DeviceKey) -> DeviceKey:
        self._keys[key.device_id] = key
        return key

    async def delete(self, device_id: str) -> None:
        self._keys.pop(device_id, None)
