"""
Record store key layout.

    user:{id}                     User record
    user_email:{email}            email -> user id
    event:{id}                    Event record
    booking:{id}                  Booking record
    user_booking:{uid}:{bid}      user -> booking id
    event_booking:{eid}:{bid}     event -> booking id
"""

USER_PREFIX = "user:"
EVENT_PREFIX = "event:"
BOOKING_PREFIX = "booking:"


def user_key(user_id: str) -> str:
    return f"{USER_PREFIX}{user_id}"


def user_email_key(email: str) -> str:
    return f"user_email:{email}"


def event_key(event_id: str) -> str:
    return f"{EVENT_PREFIX}{event_id}"


def booking_key(booking_id: str) -> str:
    return f"{BOOKING_PREFIX}{booking_id}"


def user_booking_prefix(user_id: str) -> str:
    return f"user_booking:{user_id}:"


def user_booking_key(user_id: str, booking_id: str) -> str:
    return f"{user_booking_prefix(user_id)}{booking_id}"


def event_booking_prefix(event_id: str) -> str:
    return f"event_booking:{event_id}:"


def event_booking_key(event_id: str, booking_id: str) -> str:
    return f"{event_booking_prefix(event_id)}{booking_id}"
