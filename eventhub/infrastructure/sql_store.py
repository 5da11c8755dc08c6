"""
Durable record store on a PostgreSQL key-value table.

The conditional write is a single guarded UPDATE:

    UPDATE kv_store SET value = :new
    WHERE key = :key AND (value ->> 'version')::int = :expected

Under READ COMMITTED a concurrent writer blocks on the row lock and then
re-evaluates the WHERE clause against the committed row, so at most one of
two racing writers with the same expected version matches. The extra writes
share the transaction, so either all of them land or none do.

The conditional delete is the same guard on a DELETE, so it loses to any
write that bumped the version first.
"""

from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from eventhub.core.exceptions import StoreError
from eventhub.core.logging import get_logger
from eventhub.core.metrics import record_store_operation
from eventhub.infrastructure.record_store import RecordStore
from eventhub.models.kv_entry import KVEntry

logger = get_logger(__name__)


def _upsert(key: str, value: Any):
    stmt = pg_insert(KVEntry).values(key=key, value=value)
    return stmt.on_conflict_do_update(
        index_elements=[KVEntry.key],
        set_={"value": stmt.excluded.value, "updated_at": func.now()},
    )


class SQLRecordStore(RecordStore):
    def __init__(self, engine: AsyncEngine, session_factory: async_sessionmaker[AsyncSession]):
        self._engine = engine
        self._session_factory = session_factory

    async def get(self, key: str) -> Optional[Any]:
        record_store_operation("get")
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(KVEntry.value).where(KVEntry.key == key))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("store_get_failed", key=key, error=str(e))
            raise StoreError("Record store unavailable") from e

    async def set(self, key: str, value: Any) -> None:
        record_store_operation("set")
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(_upsert(key, value))
        except SQLAlchemyError as e:
            logger.error("store_set_failed", key=key, error=str(e))
            raise StoreError("Record store unavailable") from e

    async def delete(self, key: str) -> None:
        record_store_operation("delete")
        try:
            async with self._session_factory() as session, session.begin():
                await session.execute(delete(KVEntry).where(KVEntry.key == key))
        except SQLAlchemyError as e:
            logger.error("store_delete_failed", key=key, error=str(e))
            raise StoreError("Record store unavailable") from e

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        record_store_operation("scan")
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(KVEntry.value)
                    .where(KVEntry.key.startswith(prefix, autoescape=True))
                    .order_by(KVEntry.key)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("store_scan_failed", prefix=prefix, error=str(e))
            raise StoreError("Record store unavailable") from e

    async def compare_and_set(
        self,
        key: str,
        expected_version: Optional[int],
        value: Any,
        extra: Optional[dict[str, Any]] = None,
    ) -> bool:
        record_store_operation("cas")
        if expected_version is None:
            guarded = (
                pg_insert(KVEntry)
                .values(key=key, value=value)
                .on_conflict_do_nothing(index_elements=[KVEntry.key])
            )
        else:
            guarded = (
                update(KVEntry)
                .where(
                    KVEntry.key == key,
                    KVEntry.value["version"].as_integer() == expected_version,
                )
                .values(value=value, updated_at=func.now())
            )

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(guarded)
                    if result.rowcount == 0:
                        return False
                    for extra_key, extra_value in (extra or {}).items():
                        await session.execute(_upsert(extra_key, extra_value))
                return True
        except SQLAlchemyError as e:
            logger.error("store_cas_failed", key=key, error=str(e))
            raise StoreError("Record store unavailable") from e

    async def compare_and_delete(self, key: str, expected_version: int) -> bool:
        record_store_operation("cad")
        guarded = delete(KVEntry).where(
            KVEntry.key == key,
            KVEntry.value["version"].as_integer() == expected_version,
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(guarded)
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error("store_cad_failed", key=key, error=str(e))
            raise StoreError("Record store unavailable") from e

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(select(1))
            return True
        except SQLAlchemyError:
            return False

    async def close(self) -> None:
        await self._engine.dispose()
