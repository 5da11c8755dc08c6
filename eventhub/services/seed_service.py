"""
Demo data loaded into an empty record store at startup.
Runs once, before the application starts serving requests.
"""

from datetime import datetime, timezone

from eventhub.core.config import Settings
from eventhub.core.logging import get_logger
from eventhub.core.security import hash_password
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.event import Event
from eventhub.models.keys import EVENT_PREFIX, USER_PREFIX, event_key
from eventhub.models.base import new_id
from eventhub.models.user import User
from eventhub.services.auth_service import create_user

logger = get_logger(__name__)

SAMPLE_EVENTS = [
    {
        "id": "1",
        "title": "React Developer Conference 2027",
        "description": "Join us for the biggest React conference of the year! Learn about the latest "
                       "features, best practices, and connect with fellow developers.",
        "date_time": datetime(2027, 3, 15, 10, 0, tzinfo=timezone.utc),
        "location": "San Francisco Convention Center",
        "category": "Conference",
        "total_tickets": 500,
        "available_tickets": 350,
        "price": 299.99,
        "image_url": "https://images.unsplash.com/photo-1540575467063-178a50c2df87",
    },
    {
        "id": "2",
        "title": "Jazz Night at Blue Note",
        "description": "An intimate evening of smooth jazz featuring renowned musicians from around the world.",
        "date_time": datetime(2027, 2, 28, 20, 0, tzinfo=timezone.utc),
        "location": "Blue Note Jazz Club, NYC",
        "category": "Concert",
        "total_tickets": 150,
        "available_tickets": 75,
        "price": 85.00,
        "image_url": "https://images.unsplash.com/photo-1493225457124-a3eb161ffa5f",
    },
    {
        "id": "3",
        "title": "Digital Marketing Workshop",
        "description": "Master the art of digital marketing with hands-on workshops covering SEO, "
                       "social media, and content strategy.",
        "date_time": datetime(2027, 3, 5, 9, 0, tzinfo=timezone.utc),
        "location": "Downtown Business Center",
        "category": "Workshop",
        "total_tickets": 50,
        "available_tickets": 25,
        "price": 150.00,
        "image_url": "https://images.unsplash.com/photo-1552664730-d307ca884978",
    },
    {
        "id": "4",
        "title": "Championship Basketball Game",
        "description": "Don't miss the thrilling championship game between the city's top teams!",
        "date_time": datetime(2027, 4, 12, 19, 0, tzinfo=timezone.utc),
        "location": "Madison Square Garden",
        "category": "Sports",
        "total_tickets": 20000,
        "available_tickets": 15000,
        "price": 75.00,
        "image_url": "https://images.unsplash.com/photo-1546519638-68e109498ffc",
    },
    {
        "id": "5",
        "title": "Art Gallery Opening",
        "description": "Discover contemporary art from emerging local artists at our latest gallery opening.",
        "date_time": datetime(2027, 3, 20, 18, 0, tzinfo=timezone.utc),
        "location": "Modern Art Gallery",
        "category": "Arts & Culture",
        "total_tickets": 200,
        "available_tickets": 180,
        "price": 25.00,
        "image_url": "https://images.unsplash.com/photo-1578321272176-b7bbc0679853",
    },
]


async def seed_store(store: RecordStore, settings: Settings) -> None:
    """Create the demo accounts and sample events if none exist yet."""
    if not await store.get_by_prefix(USER_PREFIX):
        accounts = [
            (settings.SEED_USER_EMAIL, settings.SEED_USER_PASSWORD, "Test", False),
            (settings.SEED_ADMIN_EMAIL, settings.SEED_ADMIN_PASSWORD, "Admin", True),
        ]
        for email, password, first_name, is_admin in accounts:
            user = User(
                id=new_id(),
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name="User",
                is_admin=is_admin,
            )
            await create_user(store, user)
        logger.info("seed_users_created", count=len(accounts))

    if not await store.get_by_prefix(EVENT_PREFIX):
        for data in SAMPLE_EVENTS:
            event = Event(**data)
            await store.set(event_key(event.id), event.to_record())
        logger.info("seed_events_created", count=len(SAMPLE_EVENTS))
