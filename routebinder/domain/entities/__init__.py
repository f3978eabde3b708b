"""Domain entities."""

from routebinder.domain.entities.device import Device, DeviceKey
from routebinder.domain.entities.user import User

__all__ = ["Device", "DeviceKey", "User"]
