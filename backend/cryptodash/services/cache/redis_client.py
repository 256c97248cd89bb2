"""
Redis cache client for ticker data.

Keeps the latest 24h ticker per symbol so repeated price lookups inside
the freshness window never reach the exchange, and so a stale value can
be served when the exchange is unreachable.
"""

import json
import logging
import time
from typing import Optional, Dict, Any, Tuple

import redis.asyncio as redis

from cryptodash.core.config import settings
from cryptodash.schemas.market import PriceData

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_pool: Optional[redis.Redis] = None

# Stale entries are kept this long for fallback reads
STALE_TTL_SECONDS = 3600


async def init_redis() -> Optional[redis.Redis]:
    """
    Initialize Redis connection pool.
    Called on application startup.
    """
    global _redis_pool

    if _redis_pool is not None:
        return _redis_pool

    try:
        _redis_pool = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Test connection
        await _redis_pool.ping()
        logger.info(f"Redis connected: {settings.redis_url}")
        return _redis_pool
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        _redis_pool = None
        return None


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool:
        await _redis_pool.aclose()
        _redis_pool = None
        logger.info("Redis connection closed")


def get_redis() -> Optional[redis.Redis]:
    """Get the Redis connection pool."""
    return _redis_pool


class PriceCache:
    """
    Ticker cache, Redis-backed with an in-memory fallback.

    Keys:
    - ticker:{symbol} -> JSON {"price": PriceData, "ts": epoch seconds}
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        max_age: Optional[float] = None,
    ):
        self._redis = redis_client
        self._memory_cache: Dict[str, str] = {}
        self.max_age = settings.price_cache_seconds if max_age is None else max_age

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis or _redis_pool

    @staticmethod
    def _key(symbol: str) -> str:
        return f"ticker:{symbol.upper()}"

    async def _read(self, key: str) -> Optional[Dict[str, Any]]:
        if self.redis:
            try:
                value = await self.redis.get(key)
                return json.loads(value) if value else None
            except Exception as e:
                logger.debug(f"Redis get {key} failed: {e}")

        value = self._memory_cache.get(key)
        return json.loads(value) if value else None

    async def set_price(self, symbol: str, price: PriceData) -> None:
        """Store a ticker, stamped with the current time."""
        key = self._key(symbol)
        value = json.dumps({"price": price.model_dump(), "ts": time.time()})

        if self.redis:
            try:
                await self.redis.set(key, value, ex=STALE_TTL_SECONDS)
                return
            except Exception as e:
                logger.debug(f"Redis set_price failed: {e}")

        self._memory_cache[key] = value

    async def get_entry(self, symbol: str) -> Optional[Tuple[PriceData, float]]:
        """Return (ticker, age in seconds) regardless of freshness."""
        entry = await self._read(self._key(symbol))
        if entry is None:
            return None
        return PriceData(**entry["price"]), time.time() - entry["ts"]

    async def get_fresh(self, symbol: str) -> Optional[PriceData]:
        """Return the cached ticker only if younger than max_age."""
        entry = await self.get_entry(symbol)
        if entry is None:
            return None
        price, age = entry
        return price if age < self.max_age else None

    async def get_stale(self, symbol: str) -> Optional[PriceData]:
        """Return the cached ticker at any age (fallback on upstream errors)."""
        entry = await self.get_entry(symbol)
        return entry[0] if entry else None
