"""
Tests for PriceCache without Redis (in-memory fallback).
"""

from unittest.mock import AsyncMock

import pytest

from cryptodash.schemas.market import PriceData
from cryptodash.services.cache.redis_client import PriceCache


PRICE = PriceData(price=65000.0, price_change=1.2, volume=100.0, high_24h=66000.0, low_24h=64000.0)


class TestMemoryFallback:
    @pytest.mark.asyncio
    async def test_fresh_hit(self):
        cache = PriceCache(max_age=60)
        await cache.set_price("btcusdt", PRICE)

        assert await cache.get_fresh("BTCUSDT") == PRICE

    @pytest.mark.asyncio
    async def test_expired_is_stale_only(self):
        cache = PriceCache(max_age=0)
        await cache.set_price("BTCUSDT", PRICE)

        assert await cache.get_fresh("BTCUSDT") is None
        assert await cache.get_stale("BTCUSDT") == PRICE

    @pytest.mark.asyncio
    async def test_miss(self):
        cache = PriceCache()
        assert await cache.get_fresh("ETHUSDT") is None
        assert await cache.get_stale("ETHUSDT") is None

    @pytest.mark.asyncio
    async def test_entry_age(self):
        cache = PriceCache()
        await cache.set_price("BTCUSDT", PRICE)

        price, age = await cache.get_entry("BTCUSDT")
        assert price == PRICE
        assert 0 <= age < 5


class TestRedisErrors:
    @pytest.mark.asyncio
    async def test_redis_failure_falls_back_to_memory(self):
        broken = AsyncMock()
        broken.set.side_effect = ConnectionError("redis down")
        broken.get.side_effect = ConnectionError("redis down")
        cache = PriceCache(redis_client=broken, max_age=60)

        await cache.set_price("BTCUSDT", PRICE)

        assert await cache.get_fresh("BTCUSDT") == PRICE
