# src/pricefeed/domain/errors.py
"""
Domain Errors - Price Feed Exceptions

This module defines the exceptions raised by providers, the registry and
the PriceFeed facade. Every PriceFeedError can carry the adapter name and
the currency it failed for, and renders both in its message.

Files that USE this module:
- pricefeed.adapters.providers.* (raise UpstreamError, MalformedDataError, ...)
- pricefeed.application.registry (raises AdapterNotFoundError)
- pricefeed.application.price_feed (raises UnsupportedCurrencyError)
- pricefeed.domain.models (Currency.parse raises UnsupportedCurrencyError)

Files that this module USES:
- None (pure exception hierarchy)
"""
from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class PriceFeedError(DomainError):
    """
    Base exception for everything the price feed raises.

    Attributes:
        message: Human readable description of the failure
        adapter: Name of the adapter that failed (e.g. "tgju"), if known
        currency: Currency symbol the failure relates to, if known
    """

    def __init__(
        self,
        message: str,
        adapter: Optional[str] = None,
        currency: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.adapter = adapter
        self.currency = _symbol(currency)

    def with_context(self, adapter: Optional[str], currency: Any = None) -> "PriceFeedError":
        """
        Fill in adapter/currency context that is still missing.

        Already-set values are kept, so the innermost raiser wins.

        Returns:
            The same exception instance (for ``raise err.with_context(...)``)
        """
        if self.adapter is None:
            self.adapter = adapter
        if self.currency is None:
            self.currency = _symbol(currency)
        return self

    def __str__(self) -> str:
        context = [part for part in (self.adapter, self.currency) if part]
        if not context:
            return self.message
        return f"[{'/'.join(context)}] {self.message}"


class ConfigurationError(PriceFeedError):
    """Raised when a provider is configured incompletely (e.g. missing API key)."""
    pass


class AdapterNotFoundError(PriceFeedError):
    """Raised when an adapter name is not configured or has no implementation."""
    pass


class UnsupportedCurrencyError(PriceFeedError):
    """Raised when a currency is not supported or not mapped by an adapter."""
    pass


class UpstreamError(PriceFeedError):
    """Raised when the upstream API fails, returns junk, or lacks the instrument."""
    pass


class MalformedDataError(PriceFeedError):
    """Raised when a found instrument lacks its required price field."""
    pass


def _symbol(currency: Any) -> Optional[str]:
    if currency is None:
        return None
    return str(getattr(currency, "value", currency))
