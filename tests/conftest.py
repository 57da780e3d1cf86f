import os

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = ""

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import storefront.data.models  # noqa: F401
from storefront.api.deps import get_payment_client, get_session_store
from storefront.data.database import Base, build_engine, get_db
from storefront.domain.schemas import CategoryCreate, ProductCreate, UserRegister
from storefront.main import app
from storefront.services.category_service import CategoryService
from storefront.services.payment_client import PaymentClient
from storefront.services.product_service import ProductService
from storefront.services.session_store import SessionStore
from storefront.services.user_service import UserService


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def session_store():
    return SessionStore(client=fakeredis.FakeRedis(decode_responses=True), ttl=3600)


@pytest.fixture
def payment_client():
    return PaymentClient(api_key="sk_test_fake", currency="usd")


@pytest.fixture
def client(session_factory, session_store, payment_client):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_payment_client] = lambda: payment_client

    yield TestClient(app)

    app.dependency_overrides.clear()


# service-level factories
@pytest.fixture
def make_user(db):
    def _make(username="alice", password="pw123", email=None):
        return UserService(db).register_user(
            UserRegister(username=username, password=password, email=email or f"{username}@example.com")
        )

    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Books"):
        return CategoryService(db).create_category(CategoryCreate(name=name))

    return _make


@pytest.fixture
def make_product(db):
    def _make(name="Widget", price="10.00", stock=5, is_active=True, category_id=None):
        return ProductService(db).create_product(
            ProductCreate(
                name=name,
                price=Decimal(price),
                stock=stock,
                is_active=is_active,
                category_id=category_id,
            )
        )

    return _make


# api-level helpers
@pytest.fixture
def api_user(client):
    def _make(username="alice", password="pw123", email=None):
        resp = client.post(
            "/api/users/register",
            json={"username": username, "password": password, "email": email or f"{username}@example.com"},
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def api_product(client):
    def _make(name="Widget", price=10.0, stock=5, **extra):
        resp = client.post("/api/products", json={"name": name, "price": price, "stock": stock, **extra})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
