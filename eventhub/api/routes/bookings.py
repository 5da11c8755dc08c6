"""
Booking endpoints with concurrency-safe ticket reservation.
"""

from fastapi import APIRouter, Depends, status

from eventhub.api.dependencies import get_store
from eventhub.api.presenters import booking_response
from eventhub.core.security import get_current_user_id
from eventhub.infrastructure.record_store import RecordStore
from eventhub.schemas.booking import BookingCreate, BookingEnvelope, BookingListResponse
from eventhub.services.booking_service import book_tickets, get_user_bookings
from eventhub.services.cache_service import invalidate_event_cache

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingEnvelope, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
):
    """
    Book tickets from the cart.

    The event's ticket count and the new booking are written in one
    conditional store write; concurrent bookings retry on version conflicts
    and get a 409 if tickets run out or retries are exhausted.
    """
    booking, event = await book_tickets(
        store, user_id, data.event_id, data.quantity, data.total_amount
    )
    await invalidate_event_cache()
    return BookingEnvelope(booking=booking_response(booking, event))


@router.get("/me", response_model=BookingListResponse)
async def list_my_bookings(
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
):
    """Bookings of the authenticated user, newest first."""
    bookings = await get_user_bookings(store, user_id)
    return BookingListResponse(
        bookings=[booking_response(b, e, include_image=True) for b, e in bookings]
    )
