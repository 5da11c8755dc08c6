"""
Shared FastAPI dependencies: the record store and the auth gates.
"""

from fastapi import Depends, Request

from eventhub.core.security import get_current_user_id
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.user import User
from eventhub.services.auth_service import require_admin


def get_store(request: Request) -> RecordStore:
    """The record store built during application startup."""
    return request.app.state.store


async def get_current_admin(
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
) -> User:
    return await require_admin(store, user_id)
