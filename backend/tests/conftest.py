from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app


@pytest.fixture(scope="module")
def settings(tmp_path_factory):
    tmp = tmp_path_factory.mktemp("storefront")
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp / 'test.db'}",
        SECRET_KEY="test-secret",
        RESET_DB=True,
        SEED_DB=False,
        LOCK_DIR=str(tmp / "locks"),
    )


@pytest.fixture(scope="module")
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="module")
def store(client):
    return client.app.state.store


def signup(client, name="Test User"):
    email = f"{uuid4().hex[:12]}@example.com"
    res = client.post(
        "/api/auth/signup", json={"name": name, "email": email, "password": "secret123"}
    )
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return signup(client)


@pytest.fixture
def make_product(client):
    admin = signup(client, name="Admin")

    def _make(**overrides):
        payload = {
            "name": f"Product {uuid4().hex[:6]}",
            "description": "A test product",
            "price": 10,
            "category": "other",
            "stock": 5,
        }
        payload.update(overrides)
        res = client.post("/api/items", json=payload, headers=admin)
        assert res.status_code == 201, res.text
        return res.json()["item"]

    _make.headers = admin
    return _make
