"""
Public event endpoints, with Redis caching on the listing.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from eventhub.api.dependencies import get_store
from eventhub.api.presenters import booking_response
from eventhub.core.security import get_current_user_id
from eventhub.core.logging import get_logger
from eventhub.infrastructure.record_store import RecordStore
from eventhub.schemas.booking import BookingEnvelope, TicketRequest
from eventhub.schemas.event import EventEnvelope, EventListResponse, EventResponse
from eventhub.services.booking_service import book_tickets
from eventhub.services.cache_service import get_cached_events, invalidate_event_cache, set_cached_events
from eventhub.services.event_service import get_event, list_events

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=EventListResponse)
async def list_events_endpoint(
    category: Optional[str] = Query(None, description="Case-insensitive category match"),
    search: Optional[str] = Query(None, description="Substring of title or description"),
    date: Optional[str] = Query(None, description="ISO date-time prefix, e.g. 2027-03"),
    store: RecordStore = Depends(get_store),
):
    """
    List events matching every given filter.
    Results are cached in Redis until the catalog or any inventory changes.
    """
    cached = await get_cached_events(category, search, date)
    if cached:
        logger.info("events_list_cache_hit")
        cached["cached"] = True
        return EventListResponse(**cached)

    events = await list_events(store, category=category, search=search, date=date)
    response_data = {
        "events": [EventResponse.model_validate(e).model_dump(mode="json") for e in events],
        "cached": False,
    }
    await set_cached_events(category, search, date, response_data)
    return EventListResponse(**response_data)


@router.get("/{event_id}", response_model=EventEnvelope)
async def get_event_endpoint(event_id: str, store: RecordStore = Depends(get_store)):
    """Get a single event. Never cached, ticket counts are live."""
    event = await get_event(store, event_id)
    return EventEnvelope(event=EventResponse.model_validate(event))


@router.post("/{event_id}/book", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def book_event_endpoint(
    event_id: str,
    data: TicketRequest,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
):
    """Book tickets for this event."""
    booking, event = await book_tickets(store, user_id, event_id, data.quantity, data.total_amount)
    await invalidate_event_cache()
    return BookingEnvelope(booking=booking_response(booking, event))
