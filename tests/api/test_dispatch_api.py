"""API tests for the dispatcher.

Tests cover:
- Body handling (JSON, form, access_token stripping, invalid JSON)
- Path parameters passed in pattern order
- Result shapes (ControllerResult, mapping, Success, Failure, malformed)
- Error normalization ({error, ok: false})
- Header and cookie propagation from the temporal response
- Timeout race with cancellation
- Per-request isolation under concurrency
- Controllers registered with a transient lifetime
"""

import asyncio
import time

import httpx
import pytest
from fastapi.testclient import TestClient

from routebinder.core.container import CONTROLLER_NAMES, Container, Lifetime
from routebinder.main import create_app
from tests.api.probe_controller import ProbeController
from tests.conftest import bearer, login, register_user


@pytest.mark.api
class TestRequestBody:
    """Body handed to the controller."""

    def test_json_round_trip(self, probe_client):
        response = probe_client.post("/probe/echo", json={"id": "X"})

        assert response.status_code == 201
        assert response.json() == {"id": "X"}

    def test_access_token_removed_from_json_body(self, probe_client, probe):
        response = probe_client.post(
            "/probe/echo", json={"id": "X", "access_token": "not-for-controllers"}
        )

        assert response.status_code == 201
        assert response.json() == {"id": "X"}
        assert probe.calls == [("echo", {"id": "X"})]

    def test_form_body_authenticates_and_is_stripped(self, probe_client, probe):
        register_user(probe_client, "bob")
        token = login(probe_client, "bob")["access_token"]

        response = probe_client.post(
            "/probe/private-echo", data={"id": "X", "access_token": token}
        )

        assert response.status_code == 201
        assert response.json() == {"id": "X"}

    def test_no_body_is_empty_dict(self, probe_client, probe):
        response = probe_client.post("/probe/echo")

        assert response.status_code == 201
        assert response.json() == {}

    def test_invalid_json_is_400(self, probe_client, probe):
        response = probe_client.post(
            "/probe/echo",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body", "ok": False}
        assert probe.calls == []

    def test_non_object_json_is_400(self, probe_client):
        response = probe_client.post("/probe/echo", json=[1, 2, 3])

        assert response.status_code == 400
        assert response.json()["ok"] is False


@pytest.mark.api
class TestPathParameters:
    """Positional path values."""

    def test_values_follow_pattern_order(self, probe_client):
        response = probe_client.get("/probe/order/b-value/a-value")

        assert response.status_code == 200
        assert response.json() == {"second": "b-value", "first": "a-value"}


@pytest.mark.api
class TestResultShapes:
    """Controller return values."""

    def test_mapping_result(self, probe_client):
        response = probe_client.get("/probe/mapping")

        assert response.status_code == 202
        assert response.json() == {"accepted": True}

    def test_success_is_unwrapped(self, probe_client):
        response = probe_client.get("/probe/success")

        assert response.status_code == 200
        assert response.json() == {"wrapped": True}

    def test_failure_becomes_400(self, probe_client):
        response = probe_client.get("/probe/failure")

        assert response.status_code == 400
        assert response.json() == {"error": "Nope", "ok": False}

    def test_malformed_result_is_500(self, probe_client):
        response = probe_client.get("/probe/malformed")

        assert response.status_code == 500
        assert response.json()["ok"] is False

    def test_no_content_has_empty_body(self, probe_client):
        response = probe_client.delete("/probe/empty")

        assert response.status_code == 204
        assert response.content == b""


@pytest.mark.api
class TestErrors:
    """Error normalization."""

    def test_http_error_keeps_status_and_message(self, probe_client):
        response = probe_client.get("/probe/teapot")

        assert response.status_code == 418
        assert response.json() == {"error": "I'm a teapot", "ok": False}

    def test_unknown_error_hides_details(self, probe_client):
        response = probe_client.get("/probe/crash")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "ok": False}
        assert "hunter2" not in response.text

    def test_unknown_error_details_when_exposed(self, probe_client, settings):
        settings.expose_error_details = True

        response = probe_client.get("/probe/crash")

        assert response.status_code == 500
        assert response.json()["error"] == "database password is hunter2"


@pytest.mark.api
class TestResponseHeaders:
    """Headers and cookies set on ctx.response."""

    def test_cookie_and_header_are_copied(self, probe_client):
        response = probe_client.get("/probe/cookie")

        assert response.status_code == 200
        assert response.headers["X-Probe"] == "yes"
        assert response.cookies.get("session") == "abc"
        assert response.headers["content-type"] == "application/json"

    def test_trace_id_header(self, probe_client):
        response = probe_client.get("/probe/mapping", headers={"X-Trace-Id": "trace-1"})

        assert response.headers["X-Trace-Id"] == "trace-1"


@pytest.mark.api
class TestTimeout:
    """Timeout race (api_timeout is 0.5s in tests)."""

    def test_slow_handler_times_out(self, probe_client, probe):
        started = time.monotonic()
        response = probe_client.get("/probe/slow")
        elapsed = time.monotonic() - started

        assert response.status_code == 504
        assert response.json() == {"error": "timeout", "ok": False}
        assert elapsed < 5
        assert probe.cancelled.is_set()


@pytest.mark.api
class TestIsolation:
    """Concurrent requests never observe each other's user."""

    async def test_concurrent_requests_see_their_own_user(self, probe_app):
        transport = httpx.ASGITransport(app=probe_app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            tokens = {}
            for username in ("alice", "bob"):
                created = await client.post(
                    "/v1/users",
                    json={"username": username, "password": "correct-horse-battery"},
                )
                assert created.status_code == 201
                token_response = await client.post(
                    "/oauth/token",
                    data={
                        "grant_type": "password",
                        "client_id": "CLI2",
                        "client_secret": "client_secret_here",
                        "username": username,
                        "password": "correct-horse-battery",
                    },
                )
                tokens[username] = token_response.json()["access_token"]

            expected = ["alice", "bob"] * 10
            responses = await asyncio.gather(
                *(client.get("/probe/whoami", headers=bearer(tokens[name])) for name in expected)
            )

        assert [response.json()["username"] for response in responses] == expected


@pytest.fixture
def transient_probes(container: Container) -> tuple[TestClient, list[ProbeController]]:
    """Client whose probe controller is rebuilt on every resolution."""
    built: list[ProbeController] = []

    def build(_: Container) -> ProbeController:
        controller = ProbeController()
        built.append(controller)
        return controller

    container.register("ProbeController", build, lifetime=Lifetime.TRANSIENT)
    app = create_app(container=container, controllers=[*CONTROLLER_NAMES, "ProbeController"])
    return TestClient(app), built


@pytest.mark.api
class TestTransientController:
    """Controllers registered as transient are built per request."""

    def test_each_request_gets_a_new_instance(self, transient_probes):
        client, built = transient_probes
        scanned = len(built)

        first = client.post("/probe/echo", json={"n": 1})
        second = client.post("/probe/echo", json={"n": 2})

        assert (first.status_code, first.json()) == (201, {"n": 1})
        assert (second.status_code, second.json()) == (201, {"n": 2})

        per_request = built[scanned:]
        assert len(per_request) == 2
        assert per_request[0] is not per_request[1]
        assert [controller.calls for controller in per_request] == [
            [("echo", {"n": 1})],
            [("echo", {"n": 2})],
        ]

    def test_errors_still_normalized(self, transient_probes):
        client, _ = transient_probes

        response = client.get("/probe/teapot")

        assert response.status_code == 418
        assert response.json()["ok"] is False
