# src/pricefeed/adapters/cache/response_cache.py
"""
Response Cache - Per-Provider Memoization Layers

Every provider owns one ResponseCache over the shared CacheStore. It holds
two independent layers:

- parsed results: one PriceData per (prefix, provider, currency)
- raw upstream payloads: one payload per (prefix, provider, category), so a
  batch of currencies served by the same endpoint costs one upstream call
  per TTL window

Files that USE this module:
- pricefeed.adapters.providers.base (get_price and _cached_payload)
- pricefeed.application.price_feed (clear_cache forgets provider entries)

Files that this module USES:
- pricefeed.adapters.cache.store (CacheStore backend)
- pricefeed.domain.models (Currency and PriceData)
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from pricefeed.adapters.cache.store import CacheStore
from pricefeed.domain.models import Currency, PriceData

log = logging.getLogger(__name__)

DEFAULT_CATEGORY = "default"


class ResponseCache:
    """Key construction and remember() policy for one provider."""

    def __init__(
        self,
        store: CacheStore,
        adapter: str,
        prefix: str,
        ttl_seconds: int,
        enabled: bool = True,
    ):
        """
        Initialize response cache.

        Args:
            store: Shared cache store (not owned by this object)
            adapter: Provider name, part of every key
            prefix: Cache key prefix from ProviderConfig
            ttl_seconds: Lifetime of both raw and parsed entries
            enabled: When False, every call computes and nothing is stored
        """
        self.store = store
        self.adapter = adapter
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled

    def price_key(self, currency: Currency) -> str:
        return f"{self.prefix}:{self.adapter}:{Currency.parse(currency).value}"

    def raw_key(self, category: Optional[str] = None) -> str:
        return f"{self.prefix}:{self.adapter}:{category or DEFAULT_CATEGORY}:api_response"

    def price(self, currency: Currency, compute: Callable[[], PriceData]) -> PriceData:
        """Parsed-result layer: compute once per TTL window per currency."""
        if not self.enabled:
            return compute()
        return self.store.remember(self.price_key(currency), self.ttl_seconds, compute)

    def raw(self, category: Optional[str], compute: Callable[[], Any]) -> Any:
        """Raw-response layer: fetch once per TTL window per category."""
        if not self.enabled:
            return compute()
        return self.store.remember(self.raw_key(category), self.ttl_seconds, compute)

    def forget_price(self, currency: Currency) -> bool:
        key = self.price_key(currency)
        log.debug("Forgetting %s", key)
        return self.store.forget(key)

    def forget_raw(self, category: Optional[str] = None) -> bool:
        key = self.raw_key(category)
        log.debug("Forgetting %s", key)
        return self.store.forget(key)
