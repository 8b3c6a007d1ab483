# src/pricefeed/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the provider registry and the PriceFeed facade that
orchestrate the provider adapters.
"""

from pricefeed.application.registry import ADAPTERS, ProviderRegistry
from pricefeed.application.price_feed import PriceFeed

__all__ = [
    "ADAPTERS",
    "ProviderRegistry",
    "PriceFeed",
]
