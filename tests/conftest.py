"""
Shared fixtures for the ParuShop test suite.

Each test gets a fresh app on an in-memory SQLite database, so tests never
see each other's users, products or carts.
"""
import os

# Must be set before config.settings / common.security are imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from config.database import Base, build_engine, build_session_factory
from main import create_app

API = "/api/v1"

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"

DEFAULT_PASSWORD = "secret-pass"


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite://",
        access_token_secret=ACCESS_SECRET,
        refresh_token_secret=REFRESH_SECRET,
        cors_origins=["*"],
    )
    values.update(overrides)
    return Settings(**values)


def product_payload(**overrides) -> dict:
    data = {
        "name": "Classic Cotton T-Shirt",
        "category": "apparel",
        "price": 19.99,
        "rating": 4.5,
        "popularity": 10,
        "description": "Heavyweight cotton tee.",
        "images": ["/images/tee.jpg"],
        "variants": [
            {"color": "Black", "size": "M", "stock": 5},
            {"color": "White", "size": "L", "stock": 0},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def create_product(client):
    """Create a product through the API and return its serialized form."""
    def _create(**overrides):
        response = client.post(f"{API}/products", json=product_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create


@pytest.fixture
def register_user(client):
    def _register(email="ali@parushop.io", password=DEFAULT_PASSWORD, name="Ali"):
        response = client.post(
            f"{API}/users/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _register


@pytest.fixture
def login(client):
    """Log in; the client keeps the auth cookies. Returns the response data."""
    def _login(email="ali@parushop.io", password=DEFAULT_PASSWORD):
        response = client.post(f"{API}/users/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["data"]
    return _login


@pytest.fixture
def auth_client(client, register_user, login):
    """A client logged in as a freshly registered user (cookie auth)."""
    register_user()
    login()
    return client


@pytest.fixture
def file_db(tmp_path):
    """File-backed database for tests that need independent connections."""
    engine = build_engine(f"sqlite:///{tmp_path / 'parushop.db'}")
    Base.metadata.create_all(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()
