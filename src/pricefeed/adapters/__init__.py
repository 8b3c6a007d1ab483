# src/pricefeed/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (upstream price APIs)
- Cache (cache store and per-provider response cache)
"""

__all__ = []
