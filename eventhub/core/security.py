"""
Password hashing and bearer token handling.

Passwords are hashed with bcrypt (per-password salt). Tokens are HS256 JWTs
carrying the subject id, issue time and expiry, signed with SECRET_KEY.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eventhub.core.config import get_settings
from eventhub.core.exceptions import Unauthenticated
from eventhub.core.logging import get_logger

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    settings = get_settings()
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    hashed = bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    # Accounts created through social sign-in have no password
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        logger.warning("password_hash_malformed")
        return False


def create_access_token(subject_id: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": subject_id,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> Optional[str]:
    """Return the subject id of a valid token, None for anything else."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("token_expired")
        return None
    except jwt.PyJWTError as e:
        logger.info("token_rejected", reason=str(e))
        return None

    subject_id = payload.get("sub")
    if not isinstance(subject_id, str) or not subject_id:
        return None
    return subject_id


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Resolve the authenticated subject from an `Authorization: Bearer` header.
    Missing header, another scheme, or an invalid/expired token is a 401.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Authorization header required")

    subject_id = verify_access_token(credentials.credentials)
    if subject_id is None:
        raise Unauthenticated("Invalid or expired token")
    return subject_id
