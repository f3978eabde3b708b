"""Device domain entities.

Device holds the attributes of a provisioned device; DeviceKey holds the
public key it was provisioned with.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID


@dataclass
class Device:
    """Provisioned device attributes.

    Attributes:
        id: Device identifier supplied by the client (coreID).
        owner_id: User that provisioned the device.
        name: Display name (defaults to the id).
        provisioned_at: Timestamp of the last provisioning.
        firmware_name: File name of the last flashed binary, if any.
        firmware_size: Size in bytes of the last flashed binary, if any.
    """

    id: str
    owner_id: UUID
    name: str
    provisioned_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    firmware_name: str | None = None
    firmware_size: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": str(self.owner_id),
            "name": self.name,
            "provisioned_at": self.provisioned_at.isoformat(),
            "firmware_name": self.firmware_name,
            "firmware_size": self.firmware_size,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class DeviceKey:
    """Public key registered for a device.

    Attributes:
        device_id: Owning device identifier.
        algorithm: Key algorithm ("rsa" or "ecc").
        public_key: PEM-encoded SubjectPublicKeyInfo.
    """

    device_id: str
    algorithm: str
    public_key: str
