import pytest
from fastapi.testclient import TestClient

from storefront.main import create_app

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def client():
    # fresh in-memory database per test; tables are created by the app lifespan
    app = create_app(TEST_DATABASE_URL)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_product(client):
    def _make(**overrides):
        data = {
            "title": "Oil filter",
            "description": "Original oil filter",
            "code": "OF-300",
            "price": 9.99,
            "stock": 5,
        }
        data.update(overrides)
        r = client.post("/api/products", json=data)
        assert r.status_code == 201, r.text
        return r.json()["product"]
    return _make


@pytest.fixture
def make_cart(client):
    def _make(lines):
        r = client.post("/api/carts", json={"products": lines})
        assert r.status_code == 201, r.text
        return r.json()["cart"]
    return _make
