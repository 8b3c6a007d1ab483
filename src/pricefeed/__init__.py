# src/pricefeed/__init__.py
"""
PriceFeed - Unified Market Price Aggregator

Fetches crypto, fiat, precious metal and Iranian gold coin prices from
several third-party APIs (BRS API, GoldAPI, TGJU, TGN), normalizes them
into one PriceData shape and serves them through a single cached lookup
interface.
"""

__version__ = "1.0.0"
__author__ = "Masih Sadri"
