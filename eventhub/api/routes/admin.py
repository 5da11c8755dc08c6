"""
Administrator endpoints: event management, booking overview and stats.
"""

from fastapi import APIRouter, Depends, Query, status

from eventhub.api.dependencies import get_current_admin, get_store
from eventhub.api.presenters import admin_booking_response
from eventhub.core.logging import get_logger
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.user import User
from eventhub.schemas.booking import AdminBookingListResponse, StatsResponse
from eventhub.schemas.event import (
    AdminEventListResponse,
    AdminEventResponse,
    DeleteResponse,
    EventCreate,
    EventEnvelope,
    EventResponse,
    EventUpdate,
)
from eventhub.services.booking_service import get_stats, list_all_bookings
from eventhub.services.cache_service import invalidate_event_cache
from eventhub.services.event_service import (
    create_event,
    delete_event,
    list_events_with_sales,
    update_event,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats", response_model=StatsResponse)
async def stats_endpoint(
    admin: User = Depends(get_current_admin),
    store: RecordStore = Depends(get_store),
):
    return StatsResponse(**await get_stats(store))


@router.get("/events", response_model=AdminEventListResponse)
async def admin_events_endpoint(
    admin: User = Depends(get_current_admin),
    store: RecordStore = Depends(get_store),
):
    """Every event with its booked ticket count."""
    rows = await list_events_with_sales(store)
    return AdminEventListResponse(events=[
        AdminEventResponse(
            **EventResponse.model_validate(event).model_dump(),
            bookings_count=sold,
            sales_status="active" if event.available_tickets > 0 else "sold-out",
        )
        for event, sold in rows
    ])


@router.post("/events", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    admin: User = Depends(get_current_admin),
    store: RecordStore = Depends(get_store),
):
    event = await create_event(store, event_data)
    await invalidate_event_cache()
    return EventEnvelope(event=EventResponse.model_validate(event))


@router.put("/events/{event_id}", response_model=EventEnvelope)
async def update_event_endpoint(
    event_id: str,
    event_data: EventUpdate,
    admin: User = Depends(get_current_admin),
    store: RecordStore = Depends(get_store),
):
    """Partial update; omitted fields keep their values."""
    event = await update_event(store, event_id, event_data)
    await invalidate_event_cache()
    return EventEnvelope(event=EventResponse.model_validate(event))


@router.delete("/events/{event_id}", response_model=DeleteResponse)
async def delete_event_endpoint(
    event_id: str,
    admin: User = Depends(get_current_admin),
    store: RecordStore = Depends(get_store),
):
    """Delete an event. Refused with 409 while it has bookings."""
    await delete_event(store, event_id)
    await invalidate_event_cache()
    return DeleteResponse(message="Event deleted successfully")


@router.get("/bookings", response_model=AdminBookingListResponse)
async def admin_bookings_endpoint(
    limit: int = Query(50, ge=1, le=500),
    admin: User = Depends(get_current_admin),
    store: RecordStore = Depends(get_store),
):
    rows = await list_all_bookings(store, limit=limit)
    return AdminBookingListResponse(
        bookings=[admin_booking_response(b, e, u) for b, e, u in rows]
    )
