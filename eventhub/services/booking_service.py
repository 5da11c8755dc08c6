"""
Booking service with concurrency-safe ticket reservation.

CONCURRENCY STRATEGY: Optimistic Concurrency on the Event record
================================================================

Problem:
  Two users try to book the last ticket simultaneously.
  Both read available_tickets=1, both write available_tickets=0, both succeed.
  Result: Oversell.

Solution:
  Every Event record carries a `version` counter.

  1. Read the event and remember its version
  2. Check availability and build the decremented event (version + 1)
  3. RecordStore.compare_and_set(event key, expected_version=version, ...)
     writes the event, the booking and both booking indexes in one unit,
     only if nobody else wrote the event since step 1
  4. If the guard fails, someone else changed the event -> go back to 1

  The retry loop is bounded by BOOKING_MAX_RETRIES; exhausting it is a 409.
  Because the decrement and the booking are one atomic write, there is no
  state where tickets are gone but the booking is missing.
"""

import time
from typing import Optional

from eventhub.core.config import get_settings
from eventhub.core.exceptions import Conflict, InsufficientInventory, NotFound, ValidationError
from eventhub.core.logging import get_logger
from eventhub.core.metrics import booking_latency, booking_retries, record_booking_attempt
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.base import new_id
from eventhub.models.booking import Booking
from eventhub.models.event import Event
from eventhub.models.keys import (
    BOOKING_PREFIX,
    EVENT_PREFIX,
    USER_PREFIX,
    booking_key,
    event_booking_key,
    event_key,
    user_booking_key,
    user_booking_prefix,
    user_key,
)
from eventhub.models.user import User

logger = get_logger(__name__)


def _total_price(event: Event, quantity: int, total_amount: Optional[float]) -> float:
    computed = round(event.price * quantity, 2)
    if total_amount is None:
        return computed

    if not get_settings().ALLOW_PRICE_OVERRIDE:
        logger.info("price_override_ignored", event_id=event.id, requested=total_amount)
        return computed

    # An override can only discount, never charge more than list price
    if 0 <= total_amount <= computed:
        return round(total_amount, 2)

    logger.warning("price_override_rejected", event_id=event.id, requested=total_amount, computed=computed)
    return computed


async def book_tickets(
    store: RecordStore,
    user_id: str,
    event_id: Optional[str],
    quantity: Optional[int],
    total_amount: Optional[float] = None,
    max_attempts: Optional[int] = None,
) -> tuple[Booking, Event]:
    """
    Reserve `quantity` tickets for `user_id`.

    Returns the booking and the event as it was written (after the decrement).
    Raises ValidationError, NotFound, InsufficientInventory, or Conflict when
    retries run out under contention.
    """
    if not event_id:
        raise ValidationError("Event ID is required")
    if quantity is None or quantity < 1:
        raise ValidationError("Valid quantity is required")

    attempts = max_attempts or get_settings().BOOKING_MAX_RETRIES
    start_time = time.perf_counter()

    try:
        for attempt in range(1, attempts + 1):
            # Step 1: Read current event state
            record = await store.get(event_key(event_id))
            if record is None:
                record_booking_attempt("not_found")
                raise NotFound(f"Event {event_id} not found")
            event = Event.model_validate(record)

            # Step 2: Availability check against this version
            if event.available_tickets < quantity:
                logger.warning(
                    "booking_failed_no_tickets",
                    event_id=event_id,
                    requested=quantity,
                    available=event.available_tickets,
                )
                record_booking_attempt("insufficient")
                raise InsufficientInventory(event.available_tickets)

            booking = Booking(
                id=new_id(),
                user_id=user_id,
                event_id=event_id,
                quantity=quantity,
                total_price=_total_price(event, quantity, total_amount),
            )
            updated = event.revise(available_tickets=event.available_tickets - quantity)

            # Step 3: Conditional write of event + booking + indexes
            written = await store.compare_and_set(
                event_key(event_id),
                event.version,
                updated.to_record(),
                extra={
                    booking_key(booking.id): booking.to_record(),
                    user_booking_key(user_id, booking.id): booking.id,
                    event_booking_key(event_id, booking.id): booking.id,
                },
            )

            if not written:
                booking_retries.inc()
                logger.info(
                    "booking_retry",
                    event_id=event_id,
                    attempt=attempt,
                    reason="version_conflict",
                )
                continue

            record_booking_attempt("success")
            logger.info(
                "booking_created",
                booking_id=booking.id,
                user_id=user_id,
                event_id=event_id,
                quantity=quantity,
                total_price=booking.total_price,
                remaining=updated.available_tickets,
                attempt=attempt,
            )
            return booking, updated

        record_booking_attempt("conflict")
        logger.warning("booking_retries_exhausted", event_id=event_id, attempts=attempts)
        raise Conflict("Booking failed due to high demand. Please try again.")
    finally:
        booking_latency.observe(time.perf_counter() - start_time)


async def get_user_bookings(store: RecordStore, user_id: str) -> list[tuple[Booking, Optional[Event]]]:
    """
    All bookings of a user, newest first, each with its event.
    The event is None if it has since been deleted.
    """
    results = []
    for booking_id in await store.get_by_prefix(user_booking_prefix(user_id)):
        record = await store.get(booking_key(booking_id))
        if record is None:
            logger.warning("booking_index_dangling", user_id=user_id, booking_id=booking_id)
            continue
        booking = Booking.model_validate(record)
        event_record = await store.get(event_key(booking.event_id))
        event = Event.model_validate(event_record) if event_record is not None else None
        results.append((booking, event))

    results.sort(key=lambda pair: pair[0].booking_date, reverse=True)
    return results


async def list_all_bookings(
    store: RecordStore,
    limit: int = 50,
) -> list[tuple[Booking, Optional[Event], Optional[User]]]:
    """Newest bookings across all users, with their event and user when they still exist."""
    bookings = [Booking.model_validate(r) for r in await store.get_by_prefix(BOOKING_PREFIX)]
    bookings.sort(key=lambda b: b.booking_date, reverse=True)

    results = []
    for booking in bookings[:limit]:
        event_record = await store.get(event_key(booking.event_id))
        user_record = await store.get(user_key(booking.user_id))
        results.append((
            booking,
            Event.model_validate(event_record) if event_record is not None else None,
            User.model_validate(user_record) if user_record is not None else None,
        ))
    return results


async def get_stats(store: RecordStore) -> dict:
    """Admin dashboard totals."""
    events = [Event.model_validate(r) for r in await store.get_by_prefix(EVENT_PREFIX)]
    bookings = [Booking.model_validate(r) for r in await store.get_by_prefix(BOOKING_PREFIX)]
    users = await store.get_by_prefix(USER_PREFIX)

    return {
        "event_count": len(events),
        "booking_count": len(bookings),
        "revenue": round(sum(b.total_price for b in bookings), 2),
        "active_event_count": sum(1 for e in events if e.available_tickets > 0),
        "user_count": len(users),
    }
