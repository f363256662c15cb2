"""
Pytest fixtures for Stockroom backend tests.

Provides test database setup, seeded users, auth headers, and a product factory.
"""

import itertools
from decimal import Decimal

import pytest
from stockroom import create_app
from stockroom.extensions import db
from stockroom.permissions import Role
from stockroom.services import products_service
from stockroom.services.auth_service import create_user

PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def admin_user(db_session):
    return create_user(username="admin", password=PASSWORD, name="Admin User", role=Role.ADMIN)


@pytest.fixture(scope='function')
def staff_user(db_session):
    return create_user(username="staff", password=PASSWORD, name="Staff User", role=Role.STAFF)


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, "admin", PASSWORD))


@pytest.fixture(scope='function')
def staff_headers(client, staff_user):
    return auth_headers(get_auth_token(client, "staff", PASSWORD))


@pytest.fixture(scope='function')
def login(client):
    """Factory: login(username, password) -> token or None."""
    def _login(username: str, password: str = PASSWORD):
        return get_auth_token(client, username, password)
    return _login


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: make_product(stock=10, price="10.00", ...) -> Product."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        patch = {
            "sku": f"SKU-{n:03d}",
            "name": f"Product {n}",
            "category": "General",
            "price": Decimal("10.00"),
            "cost": Decimal("5.00"),
            "stock": 10,
        }
        for key, value in overrides.items():
            patch[key] = Decimal(value) if key in ("price", "cost") else value
        return products_service.create_product(patch=patch)

    return _make


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
