import pytest
from fastapi.testclient import TestClient

from todo_service.main import create_app
from todo_service.settings import Settings

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings():
    # fresh in-memory stores per test
    return Settings(persistence_backend="memory", secret_key=TEST_SECRET)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    def _register(username="alice", password="secret1"):
        return client.post("/users/register", json={"username": username, "password": password})

    return _register


@pytest.fixture
def login(client):
    def _login(username="alice", password="secret1"):
        return client.post("/users/login", json={"username": username, "password": password})

    return _login


@pytest.fixture
def auth_headers(register, login):
    """Register + login a user and return headers carrying its bearer token."""

    def _auth_headers(username="alice", password="secret1"):
        assert register(username, password).status_code == 201
        res = login(username, password)
        assert res.status_code == 200
        return {"Authorization": f"Bearer {res.json()['token']}"}

    return _auth_headers
