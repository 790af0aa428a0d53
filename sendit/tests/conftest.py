"""
Centralized Test Configuration.

Every test gets a fresh in-memory SQLite database, a mock Redis and an
empty statistics cache.
"""

from typing import Any, Dict, List, Optional

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.pool import Pool, StaticPool

from sendit.app.main import app
from sendit.app.db.session import Database
from sendit.app.core.security import get_password_hash
from sendit.app.domain.repositories import ParcelLookup, Repository
from sendit.app.models.enums import UserRole
from sendit.app.models.user import User
from sendit.app.services.cache import CacheService
import sendit.app.core.redis_client as redis_client_module

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NEW_YORK = {
    "latitude": 40.7128,
    "longitude": -74.0060,
    "address": "350 5th Ave",
    "city": "New York",
    "state": "NY",
    "country": "USA",
    "postal_code": "10118",
}

LOS_ANGELES = {
    "latitude": 34.0522,
    "longitude": -118.2437,
    "address": "200 N Spring St",
    "city": "Los Angeles",
    "state": "CA",
    "country": "USA",
    "postal_code": "90012",
}

CHICAGO = {
    "latitude": 41.8781,
    "longitude": -87.6298,
    "address": "121 N LaSalle St",
    "city": "Chicago",
    "state": "IL",
    "country": "USA",
    "postal_code": "60602",
}


# Event handler to enable foreign keys for SQLite
@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


class InMemoryRepository(Repository, ParcelLookup):
    """Dict-backed repository used to exercise the order rules without a database."""

    def __init__(self, entities: Optional[List[Any]] = None):
        self.entities: Dict[Any, Any] = {}
        for entity in entities or []:
            self.entities[entity.id] = entity
        self.deleted: List[Any] = []

    async def get(self, entity_id):
        return self.entities.get(entity_id)

    async def get_by_id(self, parcel_id):
        return await self.get(parcel_id)

    async def put(self, entity):
        if getattr(entity, "id", None) is None:
            entity.id = max(self.entities, default=0) + 1
        self.entities[entity.id] = entity
        return entity

    async def delete(self, entity):
        self.entities.pop(entity.id, None)
        self.deleted.append(entity)

    async def list(self, **filters):
        matches = [
            e for e in self.entities.values()
            if all(getattr(e, key) == value for key, value in filters.items())
        ]
        return sorted(matches, key=lambda e: e.created_at, reverse=True)


@pytest.fixture
def mock_redis(monkeypatch):
    """Replace the global redis client used by token revocation."""
    client = MockRedis()
    monkeypatch.setattr(redis_client_module, "redis_client", client)
    return client


@pytest.fixture(autouse=True)
async def database(mock_redis):
    """Fresh in-memory database per test, installed as the app's Database."""
    test_database = Database(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await test_database.connect()
    app.state.database = test_database
    await CacheService.clear()

    yield test_database

    await test_database.disconnect()
    del app.state.database


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(database):
    async for session in database.session():
        yield session


async def register(client, email, password="password123", first_name="Test", last_name="User"):
    response = await client.post("/v1/auth/register", json={
        "email": email,
        "password": password,
        "first_name": first_name,
        "last_name": last_name,
        "phone": "+1-555-0100",
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        "token": body["access_token"],
        "headers": {"Authorization": f"Bearer {body['access_token']}"},
        "user_id": body["user"]["id"],
        "email": body["user"]["email"],
    }


@pytest.fixture
async def user_auth(client):
    return await register(client, "jane@example.com", first_name="Jane", last_name="Doe")


@pytest.fixture
async def other_user_auth(client):
    return await register(client, "john@example.com", first_name="John", last_name="Roe")


@pytest.fixture
async def admin_auth(client, db_session):
    """Create admin user directly in the database and log in."""
    admin = User(
        email="admin@example.com",
        hashed_password=get_password_hash("admin12345"),
        first_name="Ada",
        last_name="Admin",
        phone="",
        role=UserRole.ADMIN,
        is_active=True,
    )
    db_session.add(admin)
    await db_session.commit()

    response = await client.post("/v1/auth/login", json={
        "email": "admin@example.com",
        "password": "admin12345"
    })
    assert response.status_code == 200, response.text
    token = response.json()["access_token"]
    return {
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
        "user_id": admin.id,
        "email": admin.email,
    }


@pytest.fixture
def parcel_payload():
    return {
        "description": "Box of books",
        "weight": 2.0,
        "dimensions": {"length": 30, "width": 20, "height": 10},
        "value": 45.0,
        "fragile": False,
    }


@pytest.fixture
async def parcel(client, user_auth, parcel_payload):
    response = await client.post("/v1/parcels", json=parcel_payload, headers=user_auth["headers"])
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def order(client, user_auth, parcel):
    response = await client.post("/v1/orders", json={
        "parcel_id": parcel["id"],
        "pickup_location": NEW_YORK,
        "destination_location": LOS_ANGELES,
    }, headers=user_auth["headers"])
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def locations():
    """Named sample locations as request payload dicts."""
    return {
        "new_york": dict(NEW_YORK),
        "los_angeles": dict(LOS_ANGELES),
        "chicago": dict(CHICAGO),
    }


@pytest.fixture
def in_memory_repository():
    return InMemoryRepository
