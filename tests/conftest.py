"""Shared fixtures for unit and API tests.

Every test gets its own Settings, container and application, so in-memory
users, devices and tokens never leak between tests.
"""

import pytest
from fastapi.testclient import TestClient

from routebinder.core.config import Settings
from routebinder.core.container import Container, build_container
from routebinder.core.enums import Environment
from routebinder.main import create_app

CLIENT_ID = "CLI2"
CLIENT_SECRET = "client_secret_here"
DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture
def settings() -> Settings:
    """Fast settings for tests: cheapest bcrypt cost, short API timeout."""
    return Settings(
        environment=Environment.TESTING,
        bcrypt_rounds=4,
        api_timeout=0.5,
    )


@pytest.fixture
def container(settings: Settings) -> Container:
    return build_container(settings)


@pytest.fixture
def app(container: Container):
    return create_app(container=container)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def register_user(client: TestClient, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Create a user through the API and return its public representation."""
    response = client.post("/v1/users", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def login(client: TestClient, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Run the password grant and return the token response."""
    response = client.post(
        "/oauth/token",
        data={
            "grant_type": "password",
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
            "username": username,
            "password": password,
        },
    )
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def access_token(client: TestClient) -> str:
    """Access token of a freshly registered user "alice"."""
    register_user(client, "alice")
    return login(client, "alice")["access_token"]


@pytest.fixture
def auth_headers(access_token: str) -> dict[str, str]:
    return bearer(access_token)
