"""
User record.

Email is unique (case-sensitive) through the user_email index. Social
sign-in accounts carry an empty password hash and can't use password login.
"""

from datetime import datetime

from pydantic import Field

from eventhub.models.base import Record, utcnow


class User(Record):
    id: str
    email: str
    password_hash: str = ""
    first_name: str = ""
    last_name: str = ""
    is_admin: bool = False
    auth_provider: str = "password"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
