# src/pricefeed/shared/validators.py
"""
Input Validation Utilities - Configuration Validation

This module provides validation functions for provider configuration values
such as base URLs, API keys and cache key prefixes, so that broken settings
are rejected when they are loaded rather than on the first price request.

Files that USE this module:
- pricefeed.config.settings (uses validation functions in field validators)
- pricefeed.adapters.providers.base (checks credentials at construction)

Files that this module USES:
- None (pure utility functions)
"""
import re
from typing import Optional


def validate_base_url(url: str) -> bool:
    """
    Validate an upstream base URL.

    Args:
        url: Base URL to validate (e.g. "https://brsapi.ir")

    Returns:
        True if the URL is http(s) with a host, False otherwise
    """
    if not url:
        return False
    return bool(re.match(r"^https?://[^\s/?#]+(/[^\s?#]*)?$", url))


def validate_api_key(api_key: Optional[str], min_length: int = 4) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace() and "/" not in api_key


def validate_cache_prefix(prefix: str) -> bool:
    """
    Validate a cache key prefix.

    The prefix is joined with ':' and '.' separators to build cache keys,
    so it may not contain either of them or whitespace.

    Args:
        prefix: Prefix to validate (e.g. "price_feed")

    Returns:
        True if valid, False otherwise
    """
    if not prefix:
        return False
    return bool(re.match(r"^[A-Za-z0-9_-]+$", prefix))
