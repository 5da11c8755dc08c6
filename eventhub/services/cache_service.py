"""
Redis caching service for event listings.

CACHING STRATEGY
================

What we cache:
  - Event listing responses (JSON-serialized), one entry per filter combination
  - Cache key pattern: "events:list:category={c}&search={s}&date={d}"

Invalidation strategy:
  - On booking: available_tickets changed
  - On event create/update/delete: the list itself changed
  - TTL-based expiry as safety net (REDIS_CACHE_TTL)

  All listing keys share the "events:list:" prefix, so invalidation is a SCAN
  over that prefix followed by deletes.

Single events are never cached: the booking page needs live ticket counts.

Every cache failure is logged and treated as a miss; the record store is
always authoritative.
"""

import json
from typing import Optional
from urllib.parse import urlencode

import redis.asyncio as redis

from eventhub.core.config import get_settings
from eventhub.core.logging import get_logger
from eventhub.core.metrics import record_cache_operation
from eventhub.infrastructure.redis_client import get_redis

logger = get_logger(__name__)

EVENT_LIST_PREFIX = "events:list:"


def _make_event_list_key(category: Optional[str], search: Optional[str], date: Optional[str]) -> str:
    query = urlencode({"category": category or "", "search": search or "", "date": date or ""})
    return f"{EVENT_LIST_PREFIX}{query}"


async def get_cached_events(
    category: Optional[str],
    search: Optional[str],
    date: Optional[str],
) -> Optional[dict]:
    """Retrieve a cached event list response."""
    client = await get_redis()
    if not client:
        return None

    key = _make_event_list_key(category, search, date)
    try:
        data = await client.get(key)
    except redis.RedisError as e:
        logger.error("cache_get_error", key=key, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    if data:
        logger.debug("cache_hit", key=key)
        return json.loads(data)
    logger.debug("cache_miss", key=key)
    return None


async def set_cached_events(
    category: Optional[str],
    search: Optional[str],
    date: Optional[str],
    data: dict,
) -> None:
    """Cache an event list response with TTL."""
    client = await get_redis()
    if not client:
        return

    settings = get_settings()
    key = _make_event_list_key(category, search, date)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except redis.RedisError as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """Drop every cached event listing."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{EVENT_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", keys_deleted=deleted)
    except redis.RedisError as e:
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_stats() -> dict:
    """Redis cache statistics for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
    except redis.RedisError as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }
