# tests/test_providers.py
"""
Provider Tests - Unit Tests for API Provider Classes

This module contains unit tests for all provider classes (TGJU, BRS API,
TGN and GoldAPI). It tests API interactions, caching behavior, error
handling, and payload parsing.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- pricefeed.adapters.providers.* (providers under test)
- unittest.mock (Mock for API mocking)
- pytest (testing framework)
"""
import pytest

from unittest.mock import patch
import requests
from datetime import datetime, timezone

from pricefeed.adapters.providers.base import parse_optional, parse_price
from pricefeed.adapters.providers.brsapi import ENDPOINTS as BRSAPI_ENDPOINTS
from pricefeed.adapters.providers.brsapi import KEY_MAP as BRSAPI_KEYS
from pricefeed.adapters.providers.brsapi import BrsapiProvider
from pricefeed.adapters.providers.goldapi import GoldApiProvider
from pricefeed.adapters.providers.tgju import KEY_MAP as TGJU_KEYS
from pricefeed.adapters.providers.tgju import TgjuProvider
from pricefeed.adapters.providers.tgn import KEY_MAP as TGN_KEYS
from pricefeed.adapters.providers.tgn import TgnProvider
from pricefeed.config.settings import (
    BRSAPI_CURRENCIES,
    GOLDAPI_CURRENCIES,
    TGJU_CURRENCIES,
    TGN_CURRENCIES,
)
from pricefeed.domain.errors import (
    ConfigurationError,
    MalformedDataError,
    UnsupportedCurrencyError,
    UpstreamError,
)
from pricefeed.domain.models import Currency, CurrencyUnit

TS_2024 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
UNIX_2024 = 1704103200  # 2024-01-01 10:00:00 UTC


class TestParsePrice:
    def test_grouped_string(self):
        assert parse_price("1,125,050,000") == 1125050000.0

    def test_missing_values_become_zero(self):
        assert parse_price(None) == 0.0
        assert parse_price("") == 0.0
        assert parse_price("   ") == 0.0

    def test_unparseable_becomes_zero(self):
        assert parse_price("n/a") == 0.0
        assert parse_price(True) == 0.0

    def test_non_finite_becomes_zero(self):
        assert parse_price("NaN") == 0.0
        assert parse_price("inf") == 0.0
        assert parse_price("-Infinity") == 0.0
        assert parse_price(float("nan")) == 0.0
        assert parse_price(float("inf")) == 0.0

    def test_numbers_pass_through(self):
        assert parse_price(42) == 42.0
        assert parse_price(0.17) == 0.17
        assert parse_price("-1,000.5") == -1000.5

    def test_persian_digits_and_separators(self):
        assert parse_price("۵۹۰٬۰۰۰") == 590000.0

    def test_parse_optional_keeps_none(self):
        assert parse_optional(None) is None
        assert parse_optional("1,000") == 1000.0


class TestTgjuProvider:
    def test_init_with_defaults(self, make_config, store):
        provider = TgjuProvider(make_config("tgju"), store)
        assert provider.get_name() == "tgju"
        assert provider.timeout == 10
        assert provider.cache.ttl_seconds == 120
        assert provider.unmapped_currencies() == []

    def test_init_without_base_url(self, make_config, store):
        with pytest.raises(ConfigurationError, match="base_url is not configured"):
            TgjuProvider(make_config("tgju", base_url=""), store)

    @patch('pricefeed.shared.http.requests.get')
    def test_get_price_parses_instrument(self, mock_get, make_config, store, make_response, tgju_payload):
        mock_get.return_value = make_response(tgju_payload)

        provider = TgjuProvider(make_config("tgju"), store)
        data = provider.get_price(Currency.USD)

        assert data.currency == Currency.USD
        assert data.price == 590000.0
        assert data.high_24h == 591000.0
        assert data.low_24h == 589000.0
        assert data.change_24h == 1000.0
        assert data.change_percentage_24h == 0.17
        assert data.unit == CurrencyUnit.IRR
        assert data.timestamp == TS_2024
        assert data.raw == tgju_payload["current"]["price_dollar_rl"]
        assert mock_get.call_args[0][0] == "https://call5.tgju.org/ajax.json"

    @patch('pricefeed.shared.http.requests.get')
    def test_get_price_twice_hits_upstream_once(self, mock_get, make_config, store, make_response, tgju_payload):
        mock_get.return_value = make_response(tgju_payload)

        provider = TgjuProvider(make_config("tgju"), store)
        first = provider.get_price(Currency.USD)
        second = provider.get_price(Currency.USD)

        assert first == second
        mock_get.assert_called_once()

    @patch('pricefeed.shared.http.requests.get')
    def test_get_prices_shares_one_payload(self, mock_get, make_config, store, make_response, tgju_payload):
        mock_get.return_value = make_response(tgju_payload)

        provider = TgjuProvider(make_config("tgju"), store)
        result = provider.get_prices([Currency.USD, Currency.EUR])

        assert list(result) == [Currency.USD, Currency.EUR]
        assert result[Currency.EUR].price == 640000.0
        mock_get.assert_called_once()

    @patch('pricefeed.shared.http.requests.get')
    def test_cache_disabled_always_fetches(self, mock_get, make_config, store, make_response, tgju_payload):
        mock_get.return_value = make_response(tgju_payload)

        provider = TgjuProvider(make_config("tgju", cache_enabled=False), store)
        provider.get_price(Currency.USD)
        provider.get_price(Currency.USD)

        assert mock_get.call_count == 2
        assert len(store) == 0

    @patch('pricefeed.shared.http.requests.get')
    def test_cache_expires_after_ttl(self, mock_get, make_config, store, clock, make_response, tgju_payload):
        mock_get.return_value = make_response(tgju_payload)

        provider = TgjuProvider(make_config("tgju", cache_ttl=120), store)
        provider.get_price(Currency.USD)
        clock.advance(121)
        provider.get_price(Currency.USD)

        assert mock_get.call_count == 2

    @patch('pricefeed.shared.http.requests.get')
    def test_cross_rate_has_no_unit(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"current": {"usd-jpy-ask": {"p": "149.5"}}})

        data = TgjuProvider(make_config("tgju"), store).get_price(Currency.JPY)

        assert data.price == 149.5
        assert data.unit is None
        assert data.high_24h is None

    @patch('pricefeed.shared.http.requests.get')
    def test_bad_timestamp_falls_back_to_fetch_time(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"current": {"price_eur": {"p": "640,000", "ts": "yesterday"}}})
        before = datetime.now(timezone.utc)

        data = TgjuProvider(make_config("tgju"), store).get_price(Currency.EUR)

        assert data.timestamp >= before

    @patch('pricefeed.shared.http.requests.get')
    def test_naive_timestamp_uses_upstream_zone(self, mock_get, make_config, store, make_response, tgju_payload):
        mock_get.return_value = make_response(tgju_payload)
        config = make_config("tgju", options={"retry_delay_ms": 0, "timezone": "Asia/Tehran"})

        data = TgjuProvider(config, store).get_price(Currency.USD)

        assert data.timestamp.tzinfo is not None
        assert data.timestamp.replace(tzinfo=None) == datetime(2024, 1, 1, 10, 0)

    @patch('pricefeed.shared.http.requests.get')
    def test_missing_instrument_raises_upstream_error(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"current": {}})

        provider = TgjuProvider(make_config("tgju"), store)
        with pytest.raises(UpstreamError, match="not found in TGJU response") as exc_info:
            provider.get_price(Currency.USD)

        assert exc_info.value.adapter == "tgju"
        assert exc_info.value.currency == "USD"

    @patch('pricefeed.shared.http.requests.get')
    def test_null_price_raises_malformed_data(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"current": {"price_dollar_rl": {"p": None}}})

        with pytest.raises(MalformedDataError):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)

    @patch('pricefeed.shared.http.requests.get')
    def test_empty_price_is_zero_not_error(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"current": {"price_dollar_rl": {"p": ""}}})

        data = TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)

        assert data.price == 0.0

    @patch('pricefeed.shared.http.requests.get')
    def test_missing_current_section(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"error": "maintenance"})

        with pytest.raises(UpstreamError, match="missing 'current' section"):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)

    @patch('pricefeed.shared.http.requests.get')
    def test_http_error_status(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(status_code=403, text="forbidden")

        with pytest.raises(UpstreamError, match="HTTP 403"):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)
        mock_get.assert_called_once()

    @patch('pricefeed.shared.http.requests.get')
    def test_server_error_is_retried_then_raised(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(status_code=500, text="boom")

        with pytest.raises(UpstreamError, match="HTTP 500"):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)
        assert mock_get.call_count == 3

    @patch('pricefeed.shared.http.requests.get')
    def test_failed_fetch_is_not_cached(self, mock_get, make_config, store, make_response, tgju_payload):
        mock_get.side_effect = [make_response(status_code=404, text="nope"), make_response(tgju_payload)]

        provider = TgjuProvider(make_config("tgju"), store)
        with pytest.raises(UpstreamError):
            provider.get_price(Currency.USD)

        assert provider.get_price(Currency.USD).price == 590000.0

    @patch('pricefeed.shared.http.requests.get')
    def test_invalid_json(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(text="<html>", json_error=ValueError("Invalid JSON"))

        with pytest.raises(UpstreamError, match="TGJU API returned invalid JSON"):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)

    @patch('pricefeed.shared.http.requests.get')
    def test_timeout(self, mock_get, make_config, store):
        mock_get.side_effect = requests.exceptions.Timeout("slow")

        with pytest.raises(UpstreamError, match="timeout after"):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)

    @patch('pricefeed.shared.http.requests.get')
    def test_connection_error(self, mock_get, make_config, store):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(UpstreamError, match="TGJU API request failed"):
            TgjuProvider(make_config("tgju"), store).get_price(Currency.USD)

    @patch('pricefeed.shared.http.requests.get')
    def test_unmapped_currency_raises_without_request(self, mock_get, make_config, store):
        provider = TgjuProvider(make_config("tgju"), store)

        with pytest.raises(UnsupportedCurrencyError):
            provider.get_price(Currency.MATIC)
        mock_get.assert_not_called()

    def test_unmapped_configured_currency_warns(self, make_config, store):
        config = make_config("tgju", currencies=[Currency.USD, Currency.MATIC])
        provider = TgjuProvider(config, store)

        assert provider.supports(Currency.MATIC)
        assert provider.unmapped_currencies() == [Currency.MATIC]

    def test_unmapped_configured_currency_strict(self, make_config, store):
        config = make_config("tgju", currencies=[Currency.USD, Currency.MATIC])

        with pytest.raises(ConfigurationError, match="MATIC"):
            TgjuProvider(config, store, strict=True)

    def test_supports_configured_currencies(self, make_config, store):
        provider = TgjuProvider(make_config("tgju"), store)

        for currency in provider.get_supported_currencies():
            assert provider.supports(currency)
        assert not provider.supports(Currency.BTC)
        assert not provider.supports("XYZ")


BRSAPI_CRYPTO = [
    {"name_en": "Bitcoin", "price": "42000", "price_toman": "7,000,000,000",
     "change_percent": 1.5, "market_cap": 820000000000, "time_unix": UNIX_2024},
    {"name_en": "Ethereum", "price": "2300", "price_toman": "380,000,000", "change_percent": -0.4},
    {"name_en": "Tether", "price": "1", "price_toman": "60,500"},
]

BRSAPI_GOLD_CURRENCY = {
    "gold": [
        {"symbol": "IR_GOLD_18K", "price": "3,600,000", "change_value": 20000, "change_percent": 0.56},
        {"symbol": "IR_GOLD_24K", "price": "4,800,000"},
    ],
    "currency": [
        {"symbol": "USD", "price": "60,000", "change_value": -100, "change_percent": -0.17},
        {"symbol": "EUR", "price": "65,000"},
        {"symbol": "AED_BUY", "price": "16,400"},
    ],
}

BRSAPI_COMMODITY = {
    "metal_precious": [
        {"symbol": "xagusd", "price": "23.41"},
        {"symbol": "XPTUSD", "price": "905"},
    ],
}


class TestBrsapiProvider:
    def test_init_without_api_key(self, make_config, store):
        with pytest.raises(ConfigurationError, match="BRS API key is not configured"):
            BrsapiProvider(make_config("brsapi", api_key=""), store)

    def test_api_key_goes_in_query(self, make_config, store):
        provider = BrsapiProvider(make_config("brsapi"), store)
        assert provider.http.params == {"key": "test-key"}
        assert provider.http.headers == {}

    @patch('pricefeed.shared.http.requests.get')
    def test_crypto_price(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_CRYPTO)

        data = BrsapiProvider(make_config("brsapi"), store).get_price(Currency.BTC)

        assert data.price == 7_000_000_000.0
        assert data.unit == CurrencyUnit.IRT
        assert data.change_percentage_24h == 1.5
        assert data.market_cap == 820000000000.0
        assert data.timestamp == TS_2024
        assert data.raw["name_en"] == "Bitcoin"
        assert mock_get.call_args[0][0] == "https://brsapi.ir/Api/Market/Cryptocurrency.php"
        assert mock_get.call_args[1]["params"] == {"key": "test-key"}

    @patch('pricefeed.shared.http.requests.get')
    def test_same_category_fetched_once(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_CRYPTO)

        provider = BrsapiProvider(make_config("brsapi"), store)
        result = provider.get_prices([Currency.BTC, Currency.ETH, Currency.USDT])

        assert len(result) == 3
        assert result[Currency.USDT].price == 60500.0
        mock_get.assert_called_once()

    @patch('pricefeed.shared.http.requests.get')
    def test_categories_are_cached_independently(self, mock_get, make_config, store, make_response):
        mock_get.side_effect = [make_response(BRSAPI_CRYPTO), make_response(BRSAPI_COMMODITY)]

        provider = BrsapiProvider(make_config("brsapi"), store)
        provider.get_prices([Currency.BTC, Currency.SILVER, Currency.ETH, Currency.PLATINUM])

        assert mock_get.call_count == 2
        urls = [c[0][0] for c in mock_get.call_args_list]
        assert urls == [
            "https://brsapi.ir/Api/Market/Cryptocurrency.php",
            "https://brsapi.ir/Api/Market/Commodity.php",
        ]

    @patch('pricefeed.shared.http.requests.get')
    def test_gold_exact_symbol_match(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_GOLD_CURRENCY)

        data = BrsapiProvider(make_config("brsapi"), store).get_price(Currency.GOLD)

        assert data.price == 3_600_000.0
        assert data.change_24h == 20000.0
        assert data.raw["symbol"] == "IR_GOLD_18K"

    @patch('pricefeed.shared.http.requests.get')
    def test_gold_currency_payload_unwrapped_from_list(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response([BRSAPI_GOLD_CURRENCY])

        data = BrsapiProvider(make_config("brsapi"), store).get_price(Currency.USD)

        assert data.price == 60000.0
        assert data.change_percentage_24h == -0.17

    @patch('pricefeed.shared.http.requests.get')
    def test_currency_symbol_substring_match(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_GOLD_CURRENCY)

        data = BrsapiProvider(make_config("brsapi"), store).get_price(Currency.AED)

        assert data.price == 16400.0
        assert data.unit == CurrencyUnit.IRT

    @patch('pricefeed.shared.http.requests.get')
    def test_commodity_case_insensitive_match(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_COMMODITY)

        data = BrsapiProvider(make_config("brsapi"), store).get_price(Currency.SILVER)

        assert data.price == 23.41
        assert data.unit == CurrencyUnit.USD

    @patch('pricefeed.shared.http.requests.get')
    def test_missing_item_raises_upstream_error(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_COMMODITY)

        with pytest.raises(UpstreamError, match="not found in BRS API response") as exc_info:
            BrsapiProvider(make_config("brsapi"), store).get_price(Currency.PALLADIUM)

        assert exc_info.value.adapter == "brsapi"
        assert exc_info.value.currency == "PALLADIUM"

    @patch('pricefeed.shared.http.requests.get')
    def test_null_price_raises_malformed_data(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response([{"name_en": "Bitcoin", "price": None}])

        with pytest.raises(MalformedDataError, match="Price data is null"):
            BrsapiProvider(make_config("brsapi"), store).get_price(Currency.BTC)

    @patch('pricefeed.shared.http.requests.get')
    def test_crypto_falls_back_to_price(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response([{"name_en": "Bitcoin", "price": "42,000"}])

        data = BrsapiProvider(make_config("brsapi"), store).get_price(Currency.BTC)

        assert data.price == 42000.0

    @patch('pricefeed.shared.http.requests.get')
    def test_crypto_non_list_payload(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"error": "invalid key"})

        with pytest.raises(UpstreamError, match="crypto response is not a list"):
            BrsapiProvider(make_config("brsapi"), store).get_price(Currency.BTC)

    @patch('pricefeed.shared.http.requests.get')
    def test_batch_fails_fast(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(BRSAPI_CRYPTO)

        provider = BrsapiProvider(make_config("brsapi"), store)
        with pytest.raises(UpstreamError):
            provider.get_prices([Currency.BTC, Currency.DOGE, Currency.ETH])


TGN_PAYLOAD = {
    "Dollar": "590,000",
    "Euro": "640,000",
    "SekehEmam": "410,000,000",
    "Derham": "",
    "TimeRead": "2024/01/01 10:00:00",
}


class TestTgnProvider:
    def test_init_without_username(self, make_config, store):
        with pytest.raises(ConfigurationError, match="TGN username is not configured"):
            TgnProvider(make_config("tgn", username=None), store)

    def test_init_without_api_key(self, make_config, store):
        with pytest.raises(ConfigurationError, match="TGN API key is not configured"):
            TgnProvider(make_config("tgn", api_key=None), store)

    @patch('pricefeed.shared.http.requests.get')
    def test_get_price(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(TGN_PAYLOAD)

        data = TgnProvider(make_config("tgn"), store).get_price(Currency.IR_COIN_EMAMI)

        assert data.price == 410_000_000.0
        assert data.unit == CurrencyUnit.IRR
        assert data.timestamp == TS_2024
        assert data.raw == {"SekehEmam": "410,000,000", "TimeRead": "2024/01/01 10:00:00"}
        assert mock_get.call_args[0][0] == "https://tgn.example.com/Pr/Get/user/test-key"

    @patch('pricefeed.shared.http.requests.get')
    def test_get_prices_shares_one_payload(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(TGN_PAYLOAD)

        result = TgnProvider(make_config("tgn"), store).get_prices([Currency.USD, Currency.EUR])

        assert result[Currency.USD].price == 590000.0
        assert result[Currency.EUR].price == 640000.0
        mock_get.assert_called_once()

    @patch('pricefeed.shared.http.requests.get')
    def test_missing_field_raises_upstream_error(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(TGN_PAYLOAD)

        with pytest.raises(UpstreamError, match="not found in TGN response"):
            TgnProvider(make_config("tgn"), store).get_price(Currency.IR_COIN_BAHAR)

    @patch('pricefeed.shared.http.requests.get')
    def test_empty_field_is_zero_price(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(TGN_PAYLOAD)

        data = TgnProvider(make_config("tgn"), store).get_price(Currency.AED)

        assert data.price == 0.0
        assert data.raw["Derham"] == ""

    @patch('pricefeed.shared.http.requests.get')
    def test_null_field_raises_malformed_data(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({**TGN_PAYLOAD, "Derham": None})

        with pytest.raises(MalformedDataError, match="null for AED"):
            TgnProvider(make_config("tgn"), store).get_price(Currency.AED)

    @patch('pricefeed.shared.http.requests.get')
    def test_missing_time_read_uses_fetch_time(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"Dollar": "590,000"})
        before = datetime.now(timezone.utc)

        data = TgnProvider(make_config("tgn"), store).get_price(Currency.USD)

        assert data.timestamp >= before


GOLDAPI_XAU = {
    "metal": "XAU",
    "currency": "USD",
    "price": 2050.5,
    "ch": 5.2,
    "chp": 0.25,
    "high_price": 2060,
    "low_price": 2040.1,
    "timestamp": UNIX_2024,
}


class TestGoldApiProvider:
    def test_init_without_api_key(self, make_config, store):
        with pytest.raises(ConfigurationError, match="GoldAPI API key is not configured"):
            GoldApiProvider(make_config("goldapi", api_key=""), store)

    @patch('pricefeed.shared.http.requests.get')
    def test_get_price(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(GOLDAPI_XAU)

        data = GoldApiProvider(make_config("goldapi"), store).get_price(Currency.GOLD)

        assert data.price == 2050.5
        assert data.symbol == "XAU"
        assert data.unit == CurrencyUnit.USD
        assert data.change_24h == 5.2
        assert data.change_percentage_24h == 0.25
        assert data.high_24h == 2060.0
        assert data.low_24h == 2040.1
        assert data.timestamp == TS_2024
        assert mock_get.call_args[0][0] == "https://www.goldapi.io/api/XAU/USD"
        assert mock_get.call_args[1]["headers"] == {"x-access-token": "test-key"}

    @patch('pricefeed.shared.http.requests.get')
    def test_base_currency_option(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({**GOLDAPI_XAU, "metal": "XAG", "currency": "EUR"})
        config = make_config("goldapi", options={"retry_delay_ms": 0, "base_currency": "eur"})

        data = GoldApiProvider(config, store).get_price(Currency.SILVER)

        assert data.unit == CurrencyUnit.EUR
        assert mock_get.call_args[0][0] == "https://www.goldapi.io/api/XAG/EUR"

    @patch('pricefeed.shared.http.requests.get')
    def test_each_metal_is_a_separate_request(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response(GOLDAPI_XAU)

        GoldApiProvider(make_config("goldapi"), store).get_prices([Currency.GOLD, Currency.PLATINUM])

        assert mock_get.call_count == 2

    @patch('pricefeed.shared.http.requests.get')
    def test_error_field_raises_upstream_error(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"error": "Invalid API Key"})

        with pytest.raises(UpstreamError, match="Invalid API Key"):
            GoldApiProvider(make_config("goldapi"), store).get_price(Currency.GOLD)

    @patch('pricefeed.shared.http.requests.get')
    def test_missing_price_raises_malformed_data(self, mock_get, make_config, store, make_response):
        mock_get.return_value = make_response({"metal": "XAU", "currency": "USD"})

        with pytest.raises(MalformedDataError):
            GoldApiProvider(make_config("goldapi"), store).get_price(Currency.GOLD)

    def test_unmapped_currency(self, make_config, store):
        with pytest.raises(UnsupportedCurrencyError):
            GoldApiProvider(make_config("goldapi"), store).get_price(Currency.BTC)


def _full_payload(driver, url):
    """A payload holding every instrument the driver's key-map knows."""
    if driver == "tgju":
        return {"current": {key: {"p": "1,000", "ts": "2024-01-01 10:00:00"} for key in TGJU_KEYS.values()}}
    if driver == "tgn":
        payload = {key: "1,000" for key in TGN_KEYS.values()}
        payload["TimeRead"] = "2024/01/01 10:00:00"
        return payload
    if driver == "goldapi":
        return {"price": 2050.5, "timestamp": UNIX_2024}

    def items(category, field):
        return [
            {field: mapping.key, "price": "1,000", "price_toman": "1,000", "time_unix": UNIX_2024}
            for mapping in BRSAPI_KEYS.values()
            if mapping.category == category
        ]

    if url.endswith(BRSAPI_ENDPOINTS["crypto"]):
        return items("crypto", "name_en")
    if url.endswith(BRSAPI_ENDPOINTS["commodity"]):
        return {"metal_precious": items("commodity", "symbol")}
    return {"gold": items("gold", "symbol"), "currency": items("currency", "symbol")}


@pytest.mark.parametrize("driver, provider_cls, currencies", [
    ("brsapi", BrsapiProvider, BRSAPI_CURRENCIES),
    ("goldapi", GoldApiProvider, GOLDAPI_CURRENCIES),
    ("tgju", TgjuProvider, TGJU_CURRENCIES),
    ("tgn", TgnProvider, TGN_CURRENCIES),
])
class TestConfiguredCurrencies:
    """Every currency a driver is configured for by default has an instrument behind it."""

    def test_every_default_currency_is_mapped(self, driver, provider_cls, currencies, make_config, store):
        provider = provider_cls(make_config(driver, currencies=currencies), store)

        assert provider.unmapped_currencies() == []
        assert provider.get_supported_currencies() == currencies

    @patch('pricefeed.shared.http.requests.get')
    def test_every_default_currency_is_priced(
        self, mock_get, driver, provider_cls, currencies, make_config, store, make_response
    ):
        mock_get.side_effect = lambda url, **kwargs: make_response(_full_payload(driver, url))
        provider = provider_cls(make_config(driver, currencies=currencies), store)

        for currency in currencies:
            assert provider.supports(currency)
            data = provider.get_price(currency)
            assert data.currency == currency
            assert data.price > 0
            assert data.timestamp is not None
