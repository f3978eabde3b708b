"""Provisioning controller: claim a device with its public key.

A device is provisioned by POSTing its public key (PEM, RSA or EC) to
``/v1/provisioning/:coreID``. The first user to provision a device owns
it; re-provisioning by the owner replaces the key, anyone else gets 403.
"""

from typing import Any

from routebinder.core.result import Failure, Success
from routebinder.domain.entities import Device, DeviceKey
from routebinder.domain.protocols import (
    DeviceKeyRepository,
    DeviceRepository,
    LoggerProtocol,
)
from routebinder.infrastructure.events import EventPublisher
from routebinder.infrastructure.security import parse_public_key
from routebinder.presentation.controllers.base import Controller
from routebinder.presentation.routing import (
    ControllerResult,
    HTTPMethod,
    RequestContext,
    RouteMetadata,
)

MISSING_KEY_MESSAGE = "No key provided"


class ProvisioningController(Controller):
    routes = [
        RouteMetadata(
            method=HTTPMethod.POST,
            path="/v1/provisioning/:coreID",
            handler="provision",
            summary="Provision a device with its public key",
        ),
    ]

    def __init__(
        self,
        device_repository: DeviceRepository,
        key_repository: DeviceKeyRepository,
        publisher: EventPublisher,
        logger: LoggerProtocol,
    ) -> None:
        self._devices = device_repository
        self._keys = key_repository
        self._publisher = publisher
        self._logger = logger

    async def provision(
        self, ctx: RequestContext, core_id: str, body: dict[str, Any]
    ) -> ControllerResult:
        user = ctx.current_user

        raw_key = body.get("publicKey")
        if not raw_key or not isinstance(raw_key, str):
            self.bad_request(MISSING_KEY_MESSAGE)

        match parse_public_key(raw_key):
            case Failure(error=error):
                self.bad_request(error)
            case Success(value=key):
                pass

        existing = await self._devices.get_by_id(core_id)
        if existing is not None and existing.owner_id != user.id:
            self.forbidden("Device is owned by another user")

        device = await self._devices.save(
            Device(
                id=core_id,
                owner_id=user.id,
                name=existing.name if existing is not None else core_id,
                firmware_name=existing.firmware_name if existing is not None else None,
                firmware_size=existing.firmware_size if existing is not None else None,
            )
        )
        await self._keys.save(
            DeviceKey(device_id=core_id, algorithm=key.algorithm, public_key=key.pem)
        )

        self._logger.info(
            "Device provisioned",
            device_id=core_id,
            user_id=str(user.id),
            algorithm=key.algorithm,
        )
        self._publisher.publish(user.id, "device.provisioned", {"id": core_id})
        return self.ok({**device.to_dict(), "key_algorithm": key.algorithm})
