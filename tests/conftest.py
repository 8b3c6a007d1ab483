# tests/conftest.py
"""
Shared Test Fixtures

Fixtures for a controllable clock, an in-memory cache store, mocked HTTP
responses and ready-made provider configurations.

Files that USE this module:
- pytest (fixtures are injected into every test module)

Files that this module USES:
- pricefeed.adapters.cache.store (InMemoryCacheStore)
- pricefeed.config.settings (ProviderConfig and default currency lists)
"""
import pytest

from unittest.mock import Mock

from pricefeed.adapters.cache.store import InMemoryCacheStore
from pricefeed.config.settings import (
    BRSAPI_CURRENCIES,
    GOLDAPI_CURRENCIES,
    TGJU_CURRENCIES,
    TGN_CURRENCIES,
    ProviderConfig,
)

BASE_URLS = {
    "brsapi": "https://brsapi.ir",
    "goldapi": "https://www.goldapi.io/api",
    "tgju": "https://call5.tgju.org",
    "tgn": "https://tgn.example.com",
}

CURRENCIES = {
    "brsapi": BRSAPI_CURRENCIES,
    "goldapi": GOLDAPI_CURRENCIES,
    "tgju": TGJU_CURRENCIES,
    "tgn": TGN_CURRENCIES,
}

TGJU_PAYLOAD = {
    "current": {
        "price_dollar_rl": {
            "p": "590,000", "h": "591,000", "l": "589,000",
            "d": "1,000", "dp": 0.17, "ts": "2024-01-01 10:00:00",
        },
        "price_eur": {
            "p": "640,000", "h": "642,000", "l": "638,000",
            "d": "2,000", "dp": 0.31, "ts": "2024-01-01 10:00:00",
        },
    }
}


class FakeClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    def _make(json_data=None, status_code=200, text=None, json_error=None):
        resp = Mock()
        resp.status_code = status_code
        resp.text = text if text is not None else str(json_data)
        if json_error is not None:
            resp.json.side_effect = json_error
        else:
            resp.json.return_value = json_data
        return resp
    return _make


@pytest.fixture
def make_config():
    """Factory for ProviderConfig with test credentials and no retry delay."""
    def _make(driver, **overrides):
        values = {
            "driver": driver,
            "base_url": BASE_URLS[driver],
            "api_key": "test-key",
            "username": "user" if driver == "tgn" else None,
            "cache_enabled": True,
            "cache_ttl": 120,
            "currencies": CURRENCIES[driver],
            "options": {"retry_delay_ms": 0},
        }
        values.update(overrides)
        return ProviderConfig(**values)
    return _make


@pytest.fixture
def tgju_payload():
    return TGJU_PAYLOAD
