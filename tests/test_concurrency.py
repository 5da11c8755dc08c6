"""
Concurrency tests: many buyers racing for a handful of tickets.

InterleavingStore yields to the event loop inside every read and before
every conditional write, so concurrent bookings really do read the same
version and collide on the write.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from eventhub.core.exceptions import Conflict, InsufficientInventory
from eventhub.infrastructure.memory_store import InMemoryRecordStore
from eventhub.models.event import Event
from eventhub.models.keys import BOOKING_PREFIX, event_booking_prefix, event_key
from eventhub.schemas.event import EventUpdate
from eventhub.services.booking_service import book_tickets
from eventhub.services.event_service import delete_event, update_event


class InterleavingStore(InMemoryRecordStore):
    def __init__(self):
        super().__init__()
        self.cas_failures = 0

    async def get(self, key):
        value = await super().get(key)
        await asyncio.sleep(0)
        return value

    async def compare_and_set(self, key, expected_version, value, extra=None):
        await asyncio.sleep(0)
        written = await super().compare_and_set(key, expected_version, value, extra)
        if not written:
            self.cas_failures += 1
        return written


async def seed_event(store, event_id: str, tickets: int) -> Event:
    event = Event(
        id=event_id,
        title="Limited Show",
        date_time=datetime(2027, 6, 1, 19, 30, tzinfo=timezone.utc),
        location="Small Venue",
        total_tickets=tickets,
        available_tickets=tickets,
        price=10.0,
    )
    await store.set(event_key(event.id), event.to_record())
    return event


class AlwaysConflictingStore(InMemoryRecordStore):
    async def compare_and_set(self, key, expected_version, value, extra=None):
        return False

    async def compare_and_delete(self, key, expected_version):
        return False


class SlowScanStore(InMemoryRecordStore):
    """Prefix scans take long enough for another coroutine to finish a booking."""

    async def get_by_prefix(self, prefix):
        values = await super().get_by_prefix(prefix)
        await asyncio.sleep(0.01)
        return values


@pytest.mark.asyncio
async def test_no_oversell_under_contention():
    """20 buyers, 5 tickets: exactly 5 bookings, never a negative count."""
    store = InterleavingStore()
    event = await seed_event(store, "hot", 5)

    results = await asyncio.gather(
        *[book_tickets(store, f"user-{i}", event.id, 1) for i in range(20)],
        return_exceptions=True,
    )

    succeeded = [r for r in results if not isinstance(r, Exception)]
    sold_out = [r for r in results if isinstance(r, InsufficientInventory)]
    assert len(succeeded) == 5
    assert len(sold_out) == 15

    stored = await store.get(event_key(event.id))
    assert stored["available_tickets"] == 0
    assert stored["version"] == event.version + 5
    assert len(await store.get_by_prefix(BOOKING_PREFIX)) == 5
    assert len(await store.get_by_prefix(event_booking_prefix(event.id))) == 5
    # The race actually happened
    assert store.cas_failures > 0


@pytest.mark.asyncio
async def test_multi_ticket_bookings_never_exceed_capacity():
    store = InterleavingStore()
    event = await seed_event(store, "hot", 10)

    results = await asyncio.gather(
        *[book_tickets(store, f"user-{i}", event.id, 3) for i in range(8)],
        return_exceptions=True,
    )

    succeeded = [r for r in results if not isinstance(r, Exception)]
    assert len(succeeded) == 3
    assert all(isinstance(r, InsufficientInventory) for r in results if isinstance(r, Exception))

    stored = await store.get(event_key(event.id))
    assert stored["available_tickets"] == 1
    sold = sum(b["quantity"] for b in await store.get_by_prefix(BOOKING_PREFIX))
    assert sold + stored["available_tickets"] == stored["total_tickets"]


@pytest.mark.asyncio
async def test_retries_exhausted_is_conflict():
    """If every conditional write loses, the booking fails cleanly."""
    store = AlwaysConflictingStore()
    event = await seed_event(store, "contended", 5)

    with pytest.raises(Conflict) as exc_info:
        await book_tickets(store, "user-1", event.id, 1, max_attempts=3)
    assert not isinstance(exc_info.value, InsufficientInventory)

    stored = await store.get(event_key(event.id))
    assert stored["available_tickets"] == 5
    assert await store.get_by_prefix(BOOKING_PREFIX) == []


@pytest.mark.asyncio
async def test_concurrent_http_bookings(client: AsyncClient, auth_headers, event_factory, store):
    """Concurrent requests through the API: successes match the ticket count."""
    event = await event_factory(event_id="limited", total=5, available=5)

    responses = await asyncio.gather(*[
        client.post(f"/api/v1/events/{event.id}/book", json={"quantity": 1}, headers=auth_headers)
        for _ in range(12)
    ])

    codes = [r.status_code for r in responses]
    assert codes.count(201) == 5
    assert codes.count(409) == 7

    stored = await store.get(event_key(event.id))
    assert stored["available_tickets"] == 0


@pytest.mark.asyncio
async def test_booking_during_delete_keeps_event():
    """A booking that lands between the bookings check and the delete wins."""
    store = SlowScanStore()
    event = await seed_event(store, "e", 5)

    deletion = asyncio.create_task(delete_event(store, event.id))
    await asyncio.sleep(0)  # let the delete read the event and start its scan
    booking, _ = await book_tickets(store, "user-1", event.id, 1)

    with pytest.raises(Conflict):
        await deletion

    stored = await store.get(event_key(event.id))
    assert stored is not None
    assert stored["available_tickets"] == 4
    assert await store.get_by_prefix(event_booking_prefix(event.id)) == [booking.id]


@pytest.mark.asyncio
async def test_delete_retries_exhausted_is_conflict():
    store = AlwaysConflictingStore()
    event = await seed_event(store, "contended", 5)

    with pytest.raises(Conflict):
        await delete_event(store, event.id)
    assert await store.get(event_key(event.id)) is not None


@pytest.mark.asyncio
async def test_capacity_change_during_bookings_keeps_sold_tickets():
    """An admin edit racing bookings never overwrites their decrements."""
    store = InterleavingStore()
    event = await seed_event(store, "hot", 10)

    results = await asyncio.gather(
        update_event(store, event.id, EventUpdate(capacity=20)),
        *[book_tickets(store, f"user-{i}", event.id, 1) for i in range(4)],
        return_exceptions=True,
    )
    assert not any(isinstance(r, Exception) for r in results)

    stored = await store.get(event_key(event.id))
    sold = sum(b["quantity"] for b in await store.get_by_prefix(BOOKING_PREFIX))
    assert sold == 4
    assert stored["total_tickets"] == 20
    assert stored["available_tickets"] == 20 - sold
    assert stored["available_tickets"] >= 0
    # The edit and the bookings really did collide
    assert store.cas_failures > 0


@pytest.mark.asyncio
async def test_update_retries_exhausted_is_conflict():
    store = AlwaysConflictingStore()
    event = await seed_event(store, "contended", 5)

    with pytest.raises(Conflict):
        await update_event(store, event.id, EventUpdate(capacity=8))

    stored = await store.get(event_key(event.id))
    assert stored["total_tickets"] == 5
    assert stored["version"] == event.version
