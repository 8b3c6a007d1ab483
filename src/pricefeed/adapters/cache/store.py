# src/pricefeed/adapters/cache/store.py
"""
Cache Store - Key/Value Storage with TTL

This module defines the cache store contract used by the price feed and a
process-local implementation of it. The store is a shared resource: one
instance is handed to every provider and to the facade, and keys are
namespaced by the callers.

There is no single-flight locking. Two callers that miss on the same key at
the same time both run their compute function and the last write wins.

Files that USE this module:
- pricefeed.adapters.cache.response_cache (ResponseCache wraps a CacheStore)
- pricefeed.application.price_feed (facade-level cache and clear_cache)
- pricefeed.app (creates the InMemoryCacheStore)

Files that this module USES:
- None (pure utility implementation)
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Protocol, Tuple, TypeVar, runtime_checkable

log = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


@runtime_checkable
class CacheStore(Protocol):
    """Contract the price feed needs from a cache backend."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def has(self, key: str) -> bool: ...

    def put(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def remember(self, key: str, ttl_seconds: int, compute: Callable[[], T]) -> T: ...

    def forget(self, key: str) -> bool: ...

    def flush(self) -> None: ...


class InMemoryCacheStore:
    """
    Simple in-memory cache with per-entry expiry.

    Expiry is measured with a monotonic clock, injectable for tests.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def _lookup(self, key: str) -> Any:
        """Return the live value for key or _MISSING, dropping expired entries."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return _MISSING
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return _MISSING
            return value

    def get(self, key: str, default: Any = None) -> Any:
        value = self._lookup(key)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a value for ttl_seconds.

        A non-positive TTL stores nothing (and drops any existing entry).
        """
        with self._lock:
            if ttl_seconds <= 0:
                self._entries.pop(key, None)
                return
            self._entries[key] = (self._clock() + ttl_seconds, value)

    def remember(self, key: str, ttl_seconds: int, compute: Callable[[], T]) -> T:
        """
        Return the cached value for key, computing and storing it on a miss.

        Args:
            key: Cache key
            ttl_seconds: Lifetime of a freshly computed value
            compute: Zero-argument callable producing the value

        Returns:
            Cached or freshly computed value

        Raises:
            Whatever compute raises; nothing is stored in that case
        """
        value = self._lookup(key)
        if value is not _MISSING:
            log.debug("Cache hit: %s", key)
            return value

        log.debug("Cache miss: %s", key)
        value = compute()
        self.put(key, value, ttl_seconds)
        return value

    def forget(self, key: str) -> bool:
        """Remove key; returns True if an entry was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def flush(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        log.info("Cache flushed (%d entries)", count)

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)

    def keys(self) -> List[str]:
        """Live keys, mostly useful for tests and debugging."""
        with self._lock:
            now = self._clock()
            return [k for k, (expires_at, _) in self._entries.items() if now < expires_at]
