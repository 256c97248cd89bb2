"""
Cache module for CryptoDash.

Provides Redis caching for ticker data.
"""

from cryptodash.services.cache.redis_client import (
    PriceCache,
    init_redis,
    close_redis,
    get_redis,
)

__all__ = [
    "PriceCache",
    "init_redis",
    "close_redis",
    "get_redis",
]
