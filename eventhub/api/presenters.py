"""
Builds response schemas from records.
"""

from typing import Optional

from eventhub.models.booking import Booking
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.booking import (
    AdminBookingResponse,
    BookingEventSnapshot,
    BookingResponse,
)


def booking_response(
    booking: Booking,
    event: Optional[Event],
    include_image: bool = False,
) -> BookingResponse:
    snapshot = None
    if event is not None:
        snapshot = BookingEventSnapshot(
            title=event.title,
            date_time=event.date_time,
            location=event.location,
            image_url=event.image_url if include_image else None,
        )
    return BookingResponse(**booking.model_dump(), event=snapshot)


def admin_booking_response(
    booking: Booking,
    event: Optional[Event],
    user: Optional[User],
) -> AdminBookingResponse:
    return AdminBookingResponse(
        **booking_response(booking, event).model_dump(),
        event_title=event.title if event else "Unknown Event",
        user_email=user.email if user else "Unknown User",
    )
