# src/pricefeed/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- HTTP transport with retry
- Logging configuration
"""

from pricefeed.shared.validators import (
    validate_api_key,
    validate_base_url,
    validate_cache_prefix,
)
from pricefeed.shared.http import HttpClient

__all__ = [
    "validate_api_key",
    "validate_base_url",
    "validate_cache_prefix",
    "HttpClient",
]
