"""
Authentication service: sign up, sign in, demo social sign-in, profiles
and the admin check layered on top of an authenticated subject.
"""

from typing import Optional

from eventhub.core.config import get_settings
from eventhub.core.exceptions import Forbidden, NotFound, Unauthenticated, ValidationError
from eventhub.core.logging import get_logger
from eventhub.core.security import create_access_token, hash_password, verify_password
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.base import new_id, utcnow
from eventhub.models.keys import user_email_key, user_key
from eventhub.models.user import User
from eventhub.schemas.user import ProfileUpdate, SignInRequest, SignUpRequest

logger = get_logger(__name__)

# Profiles returned by the demo OAuth providers
SOCIAL_PROFILES = {
    "google": {"email": "john.doe@gmail.com", "first_name": "John", "last_name": "Doe"},
    "facebook": {"email": "jane.smith@facebook.com", "first_name": "Jane", "last_name": "Smith"},
    "github": {"email": "dev.user@github.com", "first_name": "Dev", "last_name": "User"},
}


async def get_user(store: RecordStore, user_id: str) -> Optional[User]:
    record = await store.get(user_key(user_id))
    if record is None:
        return None
    return User.model_validate(record)


async def get_user_by_email(store: RecordStore, email: str) -> Optional[User]:
    user_id = await store.get(user_email_key(email))
    if user_id is None:
        return None
    return await get_user(store, user_id)


async def create_user(store: RecordStore, user: User) -> bool:
    """
    Write the user and its email index entry as one unit.
    Returns False, writing nothing, if the email is already taken.
    """
    return await store.compare_and_set(
        user_email_key(user.email),
        None,
        user.id,
        extra={user_key(user.id): user.to_record()},
    )


async def register_user(store: RecordStore, data: SignUpRequest) -> tuple[User, str]:
    """
    Register a new account and return it with an access token.
    Missing fields and duplicate emails are both a 400.
    """
    if not data.email or not data.password:
        raise ValidationError("Email and password are required")

    if await store.get(user_email_key(data.email)) is not None:
        logger.warning("registration_failed", reason="email_exists", email=data.email)
        raise ValidationError("User already exists with this email")

    user = User(
        id=new_id(),
        email=data.email,
        password_hash=hash_password(data.password),
        first_name=data.first_name or "",
        last_name=data.last_name or "",
    )
    # A concurrent sign-up may have claimed the email since the check above
    if not await create_user(store, user):
        logger.warning("registration_failed", reason="email_race", email=data.email)
        raise ValidationError("User already exists with this email")

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user, create_access_token(user.id)


async def authenticate_user(store: RecordStore, data: SignInRequest) -> tuple[User, str]:
    """Check credentials and return the user with a fresh access token."""
    if not data.email or not data.password:
        raise ValidationError("Email and password are required")

    user = await get_user_by_email(store, data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning("login_failed", email=data.email)
        raise Unauthenticated("Invalid credentials")

    logger.info("user_logged_in", user_id=user.id)
    return user, create_access_token(user.id)


async def social_sign_in(store: RecordStore, provider: Optional[str]) -> tuple[User, str]:
    """
    Sign in through one of the demo OAuth providers.
    The account is created on first use and has no password.
    """
    if not get_settings().SOCIAL_LOGIN_ENABLED:
        raise NotFound("Social sign-in is not enabled")

    profile = SOCIAL_PROFILES.get(provider or "")
    if profile is None:
        raise ValidationError("Valid provider (google, facebook, github) is required")

    user = await get_user_by_email(store, profile["email"])
    if user is None:
        candidate = User(id=new_id(), auth_provider=provider, **profile)
        if await create_user(store, candidate):
            user = candidate
            logger.info("social_user_created", user_id=user.id, provider=provider)
        else:
            user = await get_user_by_email(store, profile["email"])
            if user is None:
                raise Unauthenticated("Social sign-in failed")

    logger.info("user_logged_in", user_id=user.id, provider=provider)
    return user, create_access_token(user.id)


async def get_profile(store: RecordStore, user_id: str) -> User:
    user = await get_user(store, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


async def update_profile(store: RecordStore, user_id: str, data: ProfileUpdate) -> User:
    """Update first/last name; blank or omitted values keep the current ones."""
    user = await get_profile(store, user_id)
    updated = user.model_copy(update={
        "first_name": data.first_name or user.first_name,
        "last_name": data.last_name or user.last_name,
        "updated_at": utcnow(),
    })
    await store.set(user_key(user_id), updated.to_record())
    logger.info("profile_updated", user_id=user_id)
    return updated


async def require_admin(store: RecordStore, user_id: str) -> User:
    user = await get_user(store, user_id)
    if user is None or not user.is_admin:
        logger.warning("admin_access_denied", user_id=user_id)
        raise Forbidden("Admin access required")
    return user
