# src/pricefeed/adapters/providers/__init__.py
"""
Provider Adapters - External Price API Clients

This package contains adapters for external price APIs.
All providers extend the PriceProvider base class.
"""

from pricefeed.adapters.providers.base import PriceProvider, parse_price
from pricefeed.adapters.providers.brsapi import BrsapiProvider
from pricefeed.adapters.providers.goldapi import GoldApiProvider
from pricefeed.adapters.providers.tgju import TgjuProvider
from pricefeed.adapters.providers.tgn import TgnProvider

__all__ = [
    "PriceProvider",
    "parse_price",
    "BrsapiProvider",
    "GoldApiProvider",
    "TgjuProvider",
    "TgnProvider",
]
