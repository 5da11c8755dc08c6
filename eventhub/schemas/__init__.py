from eventhub.schemas.user import (
    SignUpRequest, SignInRequest, SocialSignInRequest, ProfileUpdate,
    UserResponse, UserEnvelope, AuthResponse,
)
from eventhub.schemas.event import (
    EventCreate, EventUpdate, EventResponse, EventEnvelope, EventListResponse,
    AdminEventResponse, AdminEventListResponse, DeleteResponse,
)
from eventhub.schemas.booking import (
    TicketRequest, BookingCreate, BookingResponse, BookingEnvelope, BookingListResponse,
    AdminBookingResponse, AdminBookingListResponse, StatsResponse,
)

__all__ = [
    "SignUpRequest", "SignInRequest", "SocialSignInRequest", "ProfileUpdate",
    "UserResponse", "UserEnvelope", "AuthResponse",
    "EventCreate", "EventUpdate", "EventResponse", "EventEnvelope", "EventListResponse",
    "AdminEventResponse", "AdminEventListResponse", "DeleteResponse",
    "TicketRequest", "BookingCreate", "BookingResponse", "BookingEnvelope", "BookingListResponse",
    "AdminBookingResponse", "AdminBookingListResponse", "StatsResponse",
]
