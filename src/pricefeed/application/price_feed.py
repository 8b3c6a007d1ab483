# src/pricefeed/application/price_feed.py
"""
Price Feed - Public Lookup Interface

This module contains the PriceFeed facade, the single entry point for
callers: price one or many currencies through the default or a named
driver, list drivers and supported currencies, and clear cached entries.

On top of each provider's own caches the facade can keep a second, coarser
cache of PriceData keyed by (driver, currency). It is disabled by default.

Files that USE this module:
- pricefeed.app (composition root and CLI)
- tests.test_price_feed (unit tests)

Files that this module USES:
- pricefeed.application.registry (ProviderRegistry)
- pricefeed.adapters.cache (CacheStore, ResponseCache for key construction)
- pricefeed.domain (models and errors)
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional

from pricefeed.adapters.cache.response_cache import ResponseCache
from pricefeed.adapters.cache.store import CacheStore
from pricefeed.adapters.providers.base import PriceProvider
from pricefeed.application.registry import ProviderRegistry
from pricefeed.config.settings import DEFAULT_CACHE_PREFIX
from pricefeed.domain.errors import UnsupportedCurrencyError
from pricefeed.domain.models import Currency, PriceData

log = logging.getLogger(__name__)


class PriceFeed:
    """
    Facade over the provider registry.

    Provider errors propagate unchanged; there is no fallback from a failing
    driver to another one.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache_store: CacheStore,
        cache_enabled: bool = False,
        cache_ttl: int = 60,
        cache_prefix: str = DEFAULT_CACHE_PREFIX,
    ):
        """
        Initialize price feed.

        Args:
            registry: Provider registry
            cache_store: Shared cache store (same one the providers use)
            cache_enabled: Enable the facade-level PriceData cache
            cache_ttl: Facade cache lifetime in seconds
            cache_prefix: Facade cache key prefix
        """
        self.registry = registry
        self.cache_store = cache_store
        self.cache_enabled = cache_enabled
        self.cache_ttl = cache_ttl
        self.cache_prefix = cache_prefix

    def driver(self, name: Optional[str] = None) -> PriceProvider:
        """Resolve a driver by name (default driver when None)."""
        return self.registry.resolve(name)

    def get_price(self, currency: Currency, driver: Optional[str] = None) -> PriceData:
        """
        Get the price of one currency.

        Args:
            currency: Currency or symbol string
            driver: Driver name, or None for the default driver

        Returns:
            PriceData from the driver (possibly cached)

        Raises:
            AdapterNotFoundError: If the driver is not configured
            UnsupportedCurrencyError: If the driver does not support the currency
            UpstreamError, MalformedDataError: Propagated from the provider
        """
        currency = Currency.parse(currency)
        name = driver or self.registry.default_name
        adapter = self.driver(name)

        if not adapter.supports(currency):
            raise UnsupportedCurrencyError(
                f"Currency [{currency.value}] is not supported by driver [{adapter.get_name()}]",
                adapter=adapter.get_name(),
                currency=currency,
            )

        return self._with_cache(name, currency, lambda: adapter.get_price(currency))

    def get_prices(
        self,
        currencies: Iterable[Currency],
        driver: Optional[str] = None,
    ) -> Dict[Currency, PriceData]:
        """
        Get prices for several currencies from one driver.

        The first failing currency aborts the batch.
        """
        parsed = [Currency.parse(c) for c in currencies]
        return self.driver(driver).get_prices(parsed)

    def get_supported_currencies(self, driver: Optional[str] = None) -> List[Currency]:
        return self.driver(driver).get_supported_currencies()

    def get_available_drivers(self) -> List[str]:
        """All configured driver names."""
        return self.registry.names()

    list_adapters = get_available_drivers

    def cache_key(self, driver: str, currency: Currency) -> str:
        """Facade-level cache key for (driver, currency)."""
        return f"{self.cache_prefix}.{driver}.{Currency.parse(currency).value}"

    def _with_cache(self, driver: str, currency: Currency, callback: Callable[[], PriceData]) -> PriceData:
        if not self.cache_enabled:
            return callback()
        return self.cache_store.remember(self.cache_key(driver, currency), self.cache_ttl, callback)

    def clear_cache(self, currency: Optional[Currency] = None, driver: Optional[str] = None) -> None:
        """
        Clear cached prices.

        - currency and driver: that one (driver, currency) entry, in the
          facade cache and in the driver's parsed-result cache
        - currency only: the same, for the default driver; other drivers'
          entries and unrelated keys in the store are left alone, only a
          call with neither argument flushes
        - driver only: every known currency for that driver, plus the
          driver's raw upstream payloads
        - neither: flush the whole cache store (shared with anything else
          that uses the same store)

        Raises:
            AdapterNotFoundError: If the driver is not configured
        """
        if currency is not None:
            name = driver or self.registry.default_name
            self._forget(name, Currency.parse(currency))
            log.info("Cache cleared for [%s] %s", name, Currency.parse(currency).value)
        elif driver:
            for curr in Currency.cases():
                self._forget(driver, curr)
            provider_cache = self._provider_cache(driver)
            for category in self.registry.provider_class(driver).raw_categories:
                provider_cache.forget_raw(category)
            log.info("Cache cleared for driver [%s]", driver)
        else:
            self.cache_store.flush()

    def _provider_cache(self, driver: str) -> ResponseCache:
        # Same keys the provider builds, without constructing the provider
        config = self.registry.config(driver)
        return ResponseCache(self.cache_store, driver, config.cache_prefix, config.cache_ttl)

    def _forget(self, driver: str, currency: Currency) -> None:
        self.cache_store.forget(self.cache_key(driver, currency))
        self._provider_cache(driver).forget_price(currency)
