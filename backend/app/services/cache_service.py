"""
Redis caching service for bus catalog listings.

CACHING STRATEGY
================

What we cache:
  - Bus search responses (JSON-serialized)
  - Cache key pattern: "buses:list:from={from_city}&to={to_city}"

Why:
  - Route search is the most frequent read on the dashboard
  - The catalog is maintained outside this service and changes rarely

Invalidation strategy:
  - TTL-based expiry only (REDIS_CACHE_TTL). Bookings never change the
    catalog, so there is no write path here that must invalidate.

What is NEVER cached:
  - Wallet balances and bookings. Settlement must always read the live
    balance from the database.
  - Single-bus reads used to resolve the fare at booking time.
"""

import json
from typing import Optional

import redis.asyncio as redis
from app.core.config import get_settings
from app.core.logging import get_logger
from app.core.metrics import record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def _normalize(city: Optional[str]) -> str:
    return (city or "").strip().lower()


def make_bus_list_key(from_city: Optional[str], to_city: Optional[str]) -> str:
    return f"buses:list:from={_normalize(from_city)}&to={_normalize(to_city)}"


async def get_cached_buses(from_city: Optional[str], to_city: Optional[str]) -> Optional[dict]:
    client = await get_redis()
    if not client:
        return None

    key = make_bus_list_key(from_city, to_city)
    try:
        data = await client.get(key)
        if data:
            record_cache_operation("get", "hit")
            return json.loads(data)
        record_cache_operation("get", "miss")
    except Exception as e:
        record_cache_operation("get", "error")
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_buses(from_city: Optional[str], to_city: Optional[str], data: dict) -> None:
    client = await get_redis()
    if not client:
        return

    key = make_bus_list_key(from_city, to_city)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", "ok")
    except Exception as e:
        record_cache_operation("set", "error")
        logger.error("cache_set_error", key=key, error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
