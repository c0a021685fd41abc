"""Shared pytest fixtures for cart tests."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import storefront.models  # noqa: F401  registers tables
from storefront.db.session import get_session
from storefront.main import app
from storefront.services.cart import CartStore
from storefront.services.notifications import Notifier
from storefront.services.storage import LocalStorage


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage(session):
    return LocalStorage(session, origin="test-device")


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def make_store(storage, notifier):
    """Build a store over the shared test storage; logged in unless told otherwise."""
    def _make(authenticated: bool = True, storage=storage, notifier=notifier) -> CartStore:
        return CartStore(storage=storage, is_authenticated=lambda: authenticated, notifier=notifier)
    return _make


@pytest.fixture
def store(make_store):
    return make_store()


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def product(product_id: str = "p1", price: float = 1000, name: str = "Silk Kaftan", **extra) -> dict:
    """Catalog record as the product views hand it to the cart."""
    return {"_id": product_id, "name": name, "price": price, "image": f"/images/{product_id}.jpg", **extra}
