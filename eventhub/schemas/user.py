"""
Pydantic schemas for identity request/response validation.

Request fields are optional at the schema level so that a missing email or
password is reported by the service with the same 400 as any other bad input.
"""

from typing import Optional
from pydantic import BaseModel, Field


class SignUpRequest(BaseModel):
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SocialSignInRequest(BaseModel):
    provider: Optional[str] = None


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    is_admin: bool

    model_config = {"from_attributes": True}


class UserEnvelope(BaseModel):
    user: UserResponse


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"
