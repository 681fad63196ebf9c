import os

# Configure the app for tests before it is imported: memory backend, fast
# bcrypt, fixed signing key.
os.environ["PERSISTENCE_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("AUTH_COOKIE_NAME", None)
os.environ.pop("TOKEN_TTL_SECONDS", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from taskboard.main import app  # noqa: E402
from taskboard.repositories import InMemoryRepository, get_repository  # noqa: E402


@pytest.fixture()
def repo():
    """A fresh process-wide repository, shared with the app for this test."""
    get_repository.cache_clear()
    yield get_repository()
    get_repository.cache_clear()


@pytest.fixture()
def memory_repo() -> InMemoryRepository:
    """A standalone repository for unit tests that bypass HTTP."""
    return InMemoryRepository()


@pytest.fixture()
def make_client(repo):
    """Factory for independent clients (each keeps its own cookie jar)."""

    def _make(**kwargs) -> TestClient:
        return TestClient(app, **kwargs)

    return _make


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


def _register(client: TestClient, email: str, password: str = "secret123") -> dict:
    res = client.post("/auth/register", json={"email": email, "password": password})
    assert res.status_code == 201, res.text
    return res.json()["user"]


@pytest.fixture()
def signup():
    """Register ``email`` on a client and return the created user."""
    return _register


@pytest.fixture()
def user_client(make_client):
    """A client signed in as alice@example.com."""
    c = make_client()
    _register(c, "alice@example.com")
    return c
