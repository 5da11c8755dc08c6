"""
Booking record: one per successful booking transaction, never modified afterwards.
References its user and event by id only, so events with bookings can't be deleted.
"""

from datetime import datetime

from pydantic import Field

from eventhub.models.base import Record, utcnow

BOOKING_CONFIRMED = "Confirmed"


class Booking(Record):
    id: str
    user_id: str
    event_id: str
    quantity: int = Field(ge=1)
    total_price: float = Field(ge=0)
    booking_date: datetime = Field(default_factory=utcnow)
    status: str = BOOKING_CONFIRMED

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"
