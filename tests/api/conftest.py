"""Fixtures for API tests: application with the probe controller bound."""

import pytest
from fastapi.testclient import TestClient

from routebinder.core.container import CONTROLLER_NAMES, Container
from routebinder.main import create_app
from tests.api.probe_controller import ProbeController


@pytest.fixture
def probe() -> ProbeController:
    return ProbeController()


@pytest.fixture
def probe_app(container: Container, probe: ProbeController):
    container.register_instance("ProbeController", probe)
    return create_app(
        container=container, controllers=[*CONTROLLER_NAMES, "ProbeController"]
    )


@pytest.fixture
def probe_client(probe_app) -> TestClient:
    return TestClient(probe_app)
