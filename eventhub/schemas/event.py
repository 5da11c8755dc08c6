"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    date: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    price: Optional[float] = Field(None, ge=0)
    capacity: Optional[int] = Field(None, gt=0, le=1_000_000)
    category: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = Field(None, max_length=2000)
    status: Optional[str] = Field(None, max_length=50)


class EventUpdate(EventCreate):
    """Every field is optional; omitted fields keep their current value."""


class EventResponse(BaseModel):
    id: str
    title: str
    description: str
    date_time: datetime
    location: str
    category: str
    total_tickets: int
    available_tickets: int
    price: float
    image_url: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class EventEnvelope(BaseModel):
    event: EventResponse


class EventListResponse(BaseModel):
    events: list[EventResponse]
    cached: bool = False


class AdminEventResponse(EventResponse):
    bookings_count: int
    sales_status: str


class AdminEventListResponse(BaseModel):
    events: list[AdminEventResponse]


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
