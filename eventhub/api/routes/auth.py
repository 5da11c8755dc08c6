"""
Authentication endpoints: sign up, sign in, and demo social sign-in.
"""

from fastapi import APIRouter, Depends, status

from eventhub.api.dependencies import get_store
from eventhub.infrastructure.record_store import RecordStore
from eventhub.schemas.user import AuthResponse, SignInRequest, SignUpRequest, SocialSignInRequest, UserResponse
from eventhub.services.auth_service import authenticate_user, register_user, social_sign_in

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignUpRequest, store: RecordStore = Depends(get_store)):
    """Register a new account and receive an access token."""
    user, token = await register_user(store, data)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/signin", response_model=AuthResponse)
async def signin(data: SignInRequest, store: RecordStore = Depends(get_store)):
    """Authenticate with email and password."""
    user, token = await authenticate_user(store, data)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/social", response_model=AuthResponse)
async def social(data: SocialSignInRequest, store: RecordStore = Depends(get_store)):
    """Sign in through a demo OAuth provider (google, facebook, github)."""
    user, token = await social_sign_in(store, data.provider)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)
