"""
Record store interface.

All entity state lives behind this key-value abstraction so the business
services never know whether they talk to process memory or a database table.
Values are JSON-serialisable (dicts, strings, numbers).
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class RecordStore(ABC):
    """
    Key-value persistence for users, events, bookings and their indexes.

    Implementations:
    - InMemoryRecordStore: process-local dict, for development and tests
    - SQLRecordStore: durable kv_store table in PostgreSQL
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the value stored at key, or None."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Insert or overwrite the value at key."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""

    @abstractmethod
    async def get_by_prefix(self, prefix: str) -> list[Any]:
        """Return the values of every key starting with prefix, ordered by key."""

    @abstractmethod
    async def compare_and_set(
        self,
        key: str,
        expected_version: Optional[int],
        value: Any,
        extra: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Atomic conditional write.

        Writes `value` at `key` and every pair in `extra` as one unit, but only
        if the record currently at `key` is a dict whose "version" equals
        `expected_version`. With `expected_version=None` the key must be
        absent instead.

        Returns:
            True if everything was written, False if the guard failed and
            nothing was written.
        """

    @abstractmethod
    async def compare_and_delete(self, key: str, expected_version: int) -> bool:
        """
        Atomic conditional delete.

        Removes `key` only if the record there is a dict whose "version"
        equals `expected_version`. Returns False, deleting nothing, otherwise
        (including when the key is already gone).
        """

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass
