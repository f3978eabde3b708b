"""API tests for device endpoints.

Tests cover:
- GET /v1/devices, GET /v1/devices/:deviceID
- PUT /v1/devices/:deviceID (rename, firmware upload)
- DELETE /v1/devices/:deviceID/keys
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from tests.conftest import bearer, login, register_user


@pytest.fixture
def device_id(client, auth_headers) -> str:
    """Provision device "core-1" for alice."""
    public_key = (
        ec.generate_private_key(ec.SECP256R1())
        .public_key()
        .public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode("ascii")
    )
    response = client.post(
        "/v1/provisioning/core-1", json={"publicKey": public_key}, headers=auth_headers
    )
    assert response.status_code == 200
    return "core-1"


@pytest.mark.api
class TestListDevices:
    """Tests for GET /v1/devices."""

    def test_empty(self, client, auth_headers):
        response = client.get("/v1/devices", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_owned_devices(self, client, auth_headers, device_id):
        response = client.get("/v1/devices", headers=auth_headers)

        assert [device["id"] for device in response.json()] == [device_id]


@pytest.mark.api
class TestGetDevice:
    """Tests for GET /v1/devices/:deviceID."""

    def test_get_owned_device(self, client, auth_headers, device_id):
        response = client.get(f"/v1/devices/{device_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["key_algorithm"] == "ecc"

    def test_unknown_device(self, client, auth_headers):
        response = client.get("/v1/devices/missing", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Device not found", "ok": False}

    def test_other_users_device_is_hidden(self, client, device_id):
        register_user(client, "mallory")
        other = login(client, "mallory")["access_token"]

        response = client.get(f"/v1/devices/{device_id}", headers=bearer(other))

        assert response.status_code == 404


@pytest.mark.api
class TestUpdateDevice:
    """Tests for PUT /v1/devices/:deviceID."""

    def test_rename(self, client, auth_headers, device_id):
        response = client.put(
            f"/v1/devices/{device_id}", json={"name": "kitchen"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "kitchen"

    def test_flash_binary(self, client, auth_headers, device_id):
        response = client.put(
            f"/v1/devices/{device_id}",
            files={"file": ("firmware.bin", b"\x00" * 128)},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["firmware_name"] == "firmware.bin"
        assert data["firmware_size"] == 128

    def test_two_binaries_rejected(self, client, auth_headers, device_id):
        response = client.put(
            f"/v1/devices/{device_id}",
            files=[("file", ("a.bin", b"a")), ("file", ("b.bin", b"b"))],
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "LIMIT_FILE_COUNT", "ok": False}

    def test_nothing_to_update(self, client, auth_headers, device_id):
        response = client.put(f"/v1/devices/{device_id}", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Nothing to update", "ok": False}


@pytest.mark.api
class TestDeleteKey:
    """Tests for DELETE /v1/devices/:deviceID/keys."""

    def test_delete_key(self, client, auth_headers, device_id):
        response = client.delete(f"/v1/devices/{device_id}/keys", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"id": device_id}
        device = client.get(f"/v1/devices/{device_id}", headers=auth_headers).json()
        assert device["key_algorithm"] is None
