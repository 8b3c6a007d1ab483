# src/pricefeed/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and the error taxonomy.
No dependencies on infrastructure or external systems.
"""

from pricefeed.domain.models import (
    Currency,
    CurrencyUnit,
    PriceData,
)
from pricefeed.domain.errors import (
    AdapterNotFoundError,
    ConfigurationError,
    DomainError,
    MalformedDataError,
    PriceFeedError,
    UnsupportedCurrencyError,
    UpstreamError,
)

__all__ = [
    "Currency",
    "CurrencyUnit",
    "PriceData",
    "DomainError",
    "PriceFeedError",
    "ConfigurationError",
    "AdapterNotFoundError",
    "UnsupportedCurrencyError",
    "UpstreamError",
    "MalformedDataError",
]
