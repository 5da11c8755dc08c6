"""
Pytest fixtures for the record store, client, and authentication.

Every test gets a fresh in-memory record store injected through the
get_store dependency, so tests are isolated and need no external services.
"""

import os

# Must be set before eventhub reads its settings
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("SEED_DATA", "false")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from eventhub.main import app
from eventhub.api.dependencies import get_store
from eventhub.core.security import create_access_token, hash_password
from eventhub.infrastructure.memory_store import InMemoryRecordStore
from eventhub.models.event import Event
from eventhub.models.keys import event_key
from eventhub.models.user import User
from eventhub.services.auth_service import create_user

TEST_PASSWORD = "testpassword123"


@pytest_asyncio.fixture
async def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest_asyncio.fixture
async def client(store: InMemoryRecordStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the store dependency with the test store."""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(store, email: str, is_admin: bool = False) -> User:
    user = User(
        id=f"user-{email.split('@')[0]}",
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        first_name="Test",
        last_name="User",
        is_admin=is_admin,
    )
    assert await create_user(store, user)
    return user


async def make_event(store, event_id: str = "evt-1", total: int = 100, available: int = 100, **fields) -> Event:
    data = {
        "id": event_id,
        "title": "Test Concert",
        "description": "A test event",
        "date_time": datetime(2027, 6, 1, 19, 30, tzinfo=timezone.utc),
        "location": "Test Venue",
        "category": "Concert",
        "total_tickets": total,
        "available_tickets": available,
        "price": 25.0,
    }
    data.update(fields)
    event = Event(**data)
    await store.set(event_key(event.id), event.to_record())
    return event


@pytest_asyncio.fixture
async def test_user(store) -> User:
    return await make_user(store, "test@example.com")


@pytest_asyncio.fixture
async def admin_user(store) -> User:
    return await make_user(store, "admin@example.com", is_admin=True)


@pytest_asyncio.fixture
async def auth_headers(test_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest_asyncio.fixture
async def test_event(store) -> Event:
    """An event with 100 tickets, all available."""
    return await make_event(store)


@pytest_asyncio.fixture
async def sold_out_event(store) -> Event:
    return await make_event(
        store,
        event_id="evt-sold-out",
        title="Sold Out Show",
        total=50,
        available=0,
        date_time=datetime.now(timezone.utc) + timedelta(days=30),
    )


@pytest_asyncio.fixture
async def event_factory(store):
    """Create extra events: `await event_factory(event_id="x", total=5, available=5)`."""
    async def factory(**fields) -> Event:
        return await make_event(store, **fields)
    return factory
