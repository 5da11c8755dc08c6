"""
Profile endpoints for the authenticated user.
"""

from fastapi import APIRouter, Depends

from eventhub.api.dependencies import get_store
from eventhub.core.security import get_current_user_id
from eventhub.infrastructure.record_store import RecordStore
from eventhub.schemas.user import ProfileUpdate, UserEnvelope, UserResponse
from eventhub.services.auth_service import get_profile, update_profile

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserEnvelope)
async def read_profile(
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
):
    user = await get_profile(store, user_id)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.put("/me", response_model=UserEnvelope)
async def edit_profile(
    data: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    store: RecordStore = Depends(get_store),
):
    user = await update_profile(store, user_id, data)
    return UserEnvelope(user=UserResponse.model_validate(user))
