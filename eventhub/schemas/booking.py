"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class TicketRequest(BaseModel):
    quantity: Optional[int] = None
    # Only honoured when ALLOW_PRICE_OVERRIDE is enabled
    total_amount: Optional[float] = Field(None, ge=0)


class BookingCreate(TicketRequest):
    event_id: Optional[str] = None


class BookingEventSnapshot(BaseModel):
    title: str
    date_time: datetime
    location: str
    image_url: Optional[str] = None


class BookingResponse(BaseModel):
    id: str
    user_id: str
    event_id: str
    quantity: int
    total_price: float
    booking_date: datetime
    status: str
    event: Optional[BookingEventSnapshot] = None


class BookingEnvelope(BaseModel):
    success: bool = True
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]


class AdminBookingResponse(BookingResponse):
    event_title: str
    user_email: str


class AdminBookingListResponse(BaseModel):
    bookings: list[AdminBookingResponse]


class StatsResponse(BaseModel):
    event_count: int
    booking_count: int
    revenue: float
    active_event_count: int
    user_count: int
