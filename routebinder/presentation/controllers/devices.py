"""Devices controller: list, inspect, flash and revoke keys of owned devices."""

from dataclasses import replace
from typing import Any

from routebinder.domain.entities import Device
from routebinder.domain.protocols import DeviceKeyRepository, DeviceRepository
from routebinder.presentation.controllers.base import Controller
from routebinder.presentation.routing import (
    ControllerResult,
    HTTPMethod,
    RequestContext,
    RouteMetadata,
    UploadField,
)

FIRMWARE_FIELD = "file"


class DevicesController(Controller):
    routes = [
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/v1/devices",
            handler="list_devices",
            summary="List the current user's devices",
        ),
        RouteMetadata(
            method=HTTPMethod.GET,
            path="/v1/devices/:deviceID",
            handler="get_device",
            summary="Get one device",
        ),
        RouteMetadata(
            method=HTTPMethod.PUT,
            path="/v1/devices/:deviceID",
            handler="update_device",
            allowed_uploads=(UploadField(FIRMWARE_FIELD, max_count=1),),
            summary="Rename a device or flash a binary",
        ),
        RouteMetadata(
            method=HTTPMethod.DELETE,
            path="/v1/devices/:deviceID/keys",
            handler="delete_key",
            summary="Revoke a device's public key",
        ),
    ]

    def __init__(
        self,
        device_repository: DeviceRepository,
        key_repository: DeviceKeyRepository,
    ) -> None:
        self._devices = device_repository
        self._keys = key_repository

    async def list_devices(
        self, ctx: RequestContext, body: dict[str, Any]
    ) -> ControllerResult:
        devices = await self._devices.list_by_owner(ctx.current_user.id)
        return self.ok([device.to_dict() for device in devices])

    async def get_device(
        self, ctx: RequestContext, device_id: str, body: dict[str, Any]
    ) -> ControllerResult:
        device = await self._owned_device(ctx, device_id)
        key = await self._keys.get_by_device_id(device_id)
        return self.ok(
            {**device.to_dict(), "key_algorithm": key.algorithm if key else None}
        )

    async def update_device(
        self, ctx: RequestContext, device_id: str, body: dict[str, Any]
    ) -> ControllerResult:
        """Apply ``name`` from the body and/or record an uploaded binary."""
        device = await self._owned_device(ctx, device_id)
        changes: dict[str, Any] = {}

        name = body.get("name")
        if name is not None:
            if not isinstance(name, str) or not name.strip():
                self.bad_request("Name must be a non-empty string")
            changes["name"] = name.strip()

        uploads = ctx.files.get(FIRMWARE_FIELD, [])
        if uploads:
            binary = uploads[0]
            content = await binary.read()
            changes["firmware_name"] = binary.filename
            changes["firmware_size"] = len(content)

        if not changes:
            self.bad_request("Nothing to update")

        device = await self._devices.save(replace(device, **changes))
        return self.ok(device.to_dict())

    async def delete_key(
        self, ctx: RequestContext, device_id: str, body: dict[str, Any]
    ) -> ControllerResult:
        await self._owned_device(ctx, device_id)
        await self._keys.delete(device_id)
        return self.ok({"id": device_id})

    async def _owned_device(self, ctx: RequestContext, device_id: str) -> Device:
        user = ctx.current_user
        device = await self._devices.get_by_id(device_id)
        # Devices of other users are reported as missing
        if device is None or device.owner_id != user.id:
            self.not_found("Device not found")
        return device
