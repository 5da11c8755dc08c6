from eventhub.models.user import User
from eventhub.models.event import Event
from eventhub.models.booking import Booking

__all__ = ["User", "Event", "Booking"]
