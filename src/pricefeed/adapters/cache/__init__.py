# src/pricefeed/adapters/cache/__init__.py
"""
Cache Adapters - TTL Store and Provider Response Cache
"""

from pricefeed.adapters.cache.store import CacheStore, InMemoryCacheStore
from pricefeed.adapters.cache.response_cache import ResponseCache

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
    "ResponseCache",
]
