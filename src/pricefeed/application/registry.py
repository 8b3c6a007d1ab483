# src/pricefeed/application/registry.py
"""
Provider Registry - Driver Name to Provider Instance

This module holds the closed table of provider implementations and resolves
configured driver names to provider instances. Instances are built lazily on
first use and reused for the lifetime of the registry.

Configuration is validated when the registry is built: every configured
entry must name a known implementation and the default driver must be
configured. Missing credentials only surface when that driver is resolved.

Files that USE this module:
- pricefeed.application.price_feed (PriceFeed resolves drivers through it)
- pricefeed.app (builds the registry from settings)
- tests.test_registry (unit tests)

Files that this module USES:
- pricefeed.adapters.providers.* (provider classes)
- pricefeed.adapters.cache.store (shared CacheStore)
- pricefeed.config.settings (ProviderConfig)
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Type

from pricefeed.adapters.cache.store import CacheStore
from pricefeed.adapters.providers.base import PriceProvider
from pricefeed.adapters.providers.brsapi import BrsapiProvider
from pricefeed.adapters.providers.goldapi import GoldApiProvider
from pricefeed.adapters.providers.tgju import TgjuProvider
from pricefeed.adapters.providers.tgn import TgnProvider
from pricefeed.config.settings import ProviderConfig
from pricefeed.domain.errors import AdapterNotFoundError

log = logging.getLogger(__name__)

# Every value of config.settings.DriverName must appear here
ADAPTERS: Dict[str, Type[PriceProvider]] = {
    "brsapi": BrsapiProvider,
    "goldapi": GoldApiProvider,
    "tgju": TgjuProvider,
    "tgn": TgnProvider,
}


class ProviderRegistry:
    """Resolves driver names to lazily-built, memoized provider instances."""

    def __init__(
        self,
        configs: Mapping[str, ProviderConfig],
        cache_store: CacheStore,
        default: str,
        strict: bool = False,
    ):
        """
        Initialize provider registry.

        Args:
            configs: Driver name -> ProviderConfig
            cache_store: Shared cache store handed to every provider
            default: Driver name used when none is given
            strict: Fail provider construction on unmapped configured currencies

        Raises:
            AdapterNotFoundError: If an entry names an unknown implementation
                or the default driver is not configured
        """
        for name, config in configs.items():
            if config.driver not in ADAPTERS:
                raise AdapterNotFoundError(f"Driver class for [{name}] ({config.driver}) not found.")
        if default not in configs:
            raise AdapterNotFoundError(f"Default driver [{default}] is not configured.")

        self._configs: Dict[str, ProviderConfig] = dict(configs)
        self._instances: Dict[str, PriceProvider] = {}
        self.cache_store = cache_store
        self.default_name = default
        self.strict = strict

    def names(self) -> List[str]:
        """Configured driver names, in configuration order."""
        return list(self._configs)

    def config(self, name: Optional[str] = None) -> ProviderConfig:
        """
        Get the configuration of a driver.

        Raises:
            AdapterNotFoundError: If the driver is not configured
        """
        name = name or self.default_name
        config = self._configs.get(name)
        if config is None:
            raise AdapterNotFoundError(f"Driver [{name}] is not configured.", adapter=name)
        return config

    def provider_class(self, name: Optional[str] = None) -> Type[PriceProvider]:
        return ADAPTERS[self.config(name).driver]

    def resolve(self, name: Optional[str] = None) -> PriceProvider:
        """
        Get the provider for a driver name, building it on first use.

        Args:
            name: Driver name, or None for the default driver

        Returns:
            The memoized provider instance

        Raises:
            AdapterNotFoundError: If the driver is not configured
            ConfigurationError: If the provider rejects its configuration
        """
        name = name or self.default_name
        instance = self._instances.get(name)
        if instance is not None:
            return instance

        provider_cls = self.provider_class(name)
        instance = provider_cls(
            self.config(name),
            self.cache_store,
            strict=self.strict,
            name=name,
        )
        self._instances[name] = instance
        log.info("Driver [%s] initialized (%s)", name, provider_cls.__name__)
        return instance

    def is_resolved(self, name: str) -> bool:
        return name in self._instances
