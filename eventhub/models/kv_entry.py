"""
Table backing the SQL record store: one row per key, value kept as JSONB.
"""

from sqlalchemy import Column, Text
from sqlalchemy.dialects.postgresql import JSONB

from eventhub.db.base import Base, TimestampMixin


class KVEntry(Base, TimestampMixin):
    __tablename__ = "kv_store"

    key = Column(Text, primary_key=True)
    value = Column(JSONB, nullable=False)

    def __repr__(self) -> str:
        return f"<KVEntry(key={self.key})>"
