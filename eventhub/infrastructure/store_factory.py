"""
Record store factory.
Builds the backend named by RECORD_STORE once, at application startup.
"""

from eventhub.core.config import Settings
from eventhub.infrastructure.memory_store import InMemoryRecordStore
from eventhub.infrastructure.record_store import RecordStore


def create_record_store(settings: Settings) -> RecordStore:
    """
    Backends:
    - memory: InMemoryRecordStore (development, tests, single process)
    - sql: SQLRecordStore on the kv_store table (DATABASE_URL)
    """
    backend = settings.RECORD_STORE.lower()

    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "sql":
        from eventhub.db.session import create_engine, create_session_factory
        from eventhub.infrastructure.sql_store import SQLRecordStore

        engine = create_engine(settings)
        return SQLRecordStore(engine, create_session_factory(engine))

    raise ValueError(f"Unknown RECORD_STORE backend: {settings.RECORD_STORE!r}")
