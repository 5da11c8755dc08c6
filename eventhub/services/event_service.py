"""
Event service handling catalog CRUD operations.
"""

from typing import Optional

from eventhub.core.config import get_settings
from eventhub.core.exceptions import Conflict, NotFound, ValidationError
from eventhub.core.logging import get_logger
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.base import new_id
from eventhub.models.booking import Booking
from eventhub.models.event import Event
from eventhub.models.keys import BOOKING_PREFIX, EVENT_PREFIX, event_booking_prefix, event_key
from eventhub.schemas.event import EventCreate, EventUpdate

logger = get_logger(__name__)

DEFAULT_CATEGORY = "General"
DEFAULT_CAPACITY = 100
DEFAULT_STATUS = "active"


async def get_event(store: RecordStore, event_id: str) -> Event:
    """Get a single event by ID."""
    record = await store.get(event_key(event_id))
    if record is None:
        raise NotFound(f"Event {event_id} not found")
    return Event.model_validate(record)


async def list_events(
    store: RecordStore,
    category: Optional[str] = None,
    search: Optional[str] = None,
    date: Optional[str] = None,
) -> list[Event]:
    """
    Return every event matching all given filters, ordered by date.

    - category: case-insensitive exact match
    - search: case-insensitive substring of title or description
    - date: prefix of the ISO-8601 date-time, e.g. "2027-03" or "2027-03-15"
    """
    events = [Event.model_validate(r) for r in await store.get_by_prefix(EVENT_PREFIX)]

    if category:
        wanted = category.lower()
        events = [e for e in events if e.category.lower() == wanted]

    if search:
        needle = search.lower()
        events = [
            e for e in events
            if needle in e.title.lower() or needle in e.description.lower()
        ]

    if date:
        events = [e for e in events if e.date_time_iso.startswith(date)]

    return sorted(events, key=lambda e: e.date_time)


async def create_event(store: RecordStore, event_data: EventCreate) -> Event:
    """Create a new event with every ticket available."""
    missing = [
        name for name in ("title", "date", "location", "price")
        if getattr(event_data, name) in (None, "")
    ]
    if missing:
        raise ValidationError("Title, date, location, and price are required")

    capacity = event_data.capacity or DEFAULT_CAPACITY
    event = Event(
        id=new_id(),
        title=event_data.title,
        description=event_data.description or "",
        date_time=event_data.date,
        location=event_data.location,
        category=event_data.category or DEFAULT_CATEGORY,
        total_tickets=capacity,
        available_tickets=capacity,
        price=event_data.price,
        image_url=event_data.image_url or "",
        status=event_data.status or DEFAULT_STATUS,
    )
    await store.set(event_key(event.id), event.to_record())

    logger.info("event_created", event_id=event.id, title=event.title, tickets=event.total_tickets)
    return event


def _apply_update(event: Event, event_data: EventUpdate) -> Event:
    changes = {}
    for field in ("title", "location", "category", "status"):
        value = getattr(event_data, field)
        if value is not None:
            if not value.strip():
                raise ValidationError(f"{field} cannot be blank")
            changes[field] = value

    if event_data.description is not None:
        changes["description"] = event_data.description
    if event_data.image_url is not None:
        changes["image_url"] = event_data.image_url
    if event_data.date is not None:
        changes["date_time"] = event_data.date
    if event_data.price is not None:
        changes["price"] = event_data.price

    capacity = event_data.capacity
    if capacity is not None and capacity != event.total_tickets:
        sold = event.tickets_sold
        if capacity < sold:
            raise ValidationError(
                f"Capacity cannot be lower than the {sold} tickets already sold"
            )
        changes["total_tickets"] = capacity
        changes["available_tickets"] = capacity - sold

    return event.revise(**changes)


async def update_event(store: RecordStore, event_id: str, event_data: EventUpdate) -> Event:
    """
    Apply a partial update. A capacity change keeps the number of tickets
    already sold, so available = new capacity - sold. The write is guarded by
    the event version and retried if a booking lands in between.
    """
    max_attempts = get_settings().BOOKING_MAX_RETRIES

    for attempt in range(1, max_attempts + 1):
        event = await get_event(store, event_id)
        updated = _apply_update(event, event_data)

        if await store.compare_and_set(event_key(event_id), event.version, updated.to_record()):
            logger.info(
                "event_updated",
                event_id=event_id,
                version=updated.version,
                available=updated.available_tickets,
                total=updated.total_tickets,
            )
            return updated

        logger.info("event_update_retry", event_id=event_id, attempt=attempt, reason="version_conflict")

    raise Conflict("Event was modified concurrently. Please try again.")


async def delete_event(store: RecordStore, event_id: str) -> None:
    """
    Delete an event that has no bookings.

    Every booking bumps the event version in the same write that adds its
    index entry, so deleting guarded on the version read before the index
    check fails if a booking landed in between.
    """
    max_attempts = get_settings().BOOKING_MAX_RETRIES

    for attempt in range(1, max_attempts + 1):
        event = await get_event(store, event_id)

        if await store.get_by_prefix(event_booking_prefix(event_id)):
            logger.warning("event_delete_refused", event_id=event_id, reason="has_bookings")
            raise Conflict("Cannot delete event with existing bookings")

        if await store.compare_and_delete(event_key(event_id), event.version):
            logger.info("event_deleted", event_id=event_id, version=event.version)
            return

        logger.info("event_delete_retry", event_id=event_id, attempt=attempt, reason="version_conflict")

    raise Conflict("Event was modified concurrently. Please try again.")


async def list_events_with_sales(store: RecordStore) -> list[tuple[Event, int]]:
    """All events with the number of tickets booked for each."""
    sold: dict[str, int] = {}
    for record in await store.get_by_prefix(BOOKING_PREFIX):
        booking = Booking.model_validate(record)
        sold[booking.event_id] = sold.get(booking.event_id, 0) + booking.quantity

    events = await list_events(store)
    return [(event, sold.get(event.id, 0)) for event in events]
