"""
Infrastructure layer - external system integrations.
Keeps business logic clean from storage and cache details.
"""

from .record_store import RecordStore
from .memory_store import InMemoryRecordStore
from .store_factory import create_record_store
from .redis_client import get_redis, close_redis

__all__ = ['RecordStore', 'InMemoryRecordStore', 'create_record_store', 'get_redis', 'close_redis']
