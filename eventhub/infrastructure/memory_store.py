"""
In-process record store.

Values are deep-copied on the way in and out so callers can never mutate
stored state by accident, which mirrors what a serialising backend does.
The conditional write holds a single asyncio.Lock for its check and writes.
"""

import asyncio
import copy
from typing import Any, Optional

from eventhub.core.metrics import record_store_operation
from eventhub.infrastructure.record_store import RecordStore


class InMemoryRecordStore(RecordStore):
    def __init__(self):
        self._data: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[Any]:
        record_store_operation("get")
        value = self._data.get(key)
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any) -> None:
        record_store_operation("set")
        async with self._lock:
            self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        record_store_operation("delete")
        async with self._lock:
            self._data.pop(key, None)

    async def get_by_prefix(self, prefix: str) -> list[Any]:
        record_store_operation("scan")
        return [
            copy.deepcopy(self._data[key])
            for key in sorted(self._data)
            if key.startswith(prefix)
        ]

    async def compare_and_set(
        self,
        key: str,
        expected_version: Optional[int],
        value: Any,
        extra: Optional[dict[str, Any]] = None,
    ) -> bool:
        record_store_operation("cas")
        async with self._lock:
            current = self._data.get(key)
            if expected_version is None:
                if current is not None:
                    return False
            elif not isinstance(current, dict) or current.get("version") != expected_version:
                return False

            self._data[key] = copy.deepcopy(value)
            for extra_key, extra_value in (extra or {}).items():
                self._data[extra_key] = copy.deepcopy(extra_value)
            return True

    async def compare_and_delete(self, key: str, expected_version: int) -> bool:
        record_store_operation("cad")
        async with self._lock:
            current = self._data.get(key)
            if not isinstance(current, dict) or current.get("version") != expected_version:
                return False
            del self._data[key]
            return True
