# tests/test_app.py
"""
Application Tests - Composition Root and CLI

Uses Click's CliRunner; no subprocesses.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- pricefeed.app (build_price_feed, main)
- click.testing (CliRunner)
- unittest.mock (patching requests.get and logging setup)
"""
import json

import pytest

from click.testing import CliRunner
from unittest.mock import patch

from pricefeed.adapters.cache.store import InMemoryCacheStore
from pricefeed.app import build_price_feed, main
from pricefeed.application.price_feed import PriceFeed
from pricefeed.application.registry import ProviderRegistry
from pricefeed.config.settings import Settings


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def tgju_feed(make_config):
    store = InMemoryCacheStore()
    registry = ProviderRegistry({"tgju": make_config("tgju")}, store, default="tgju")
    return PriceFeed(registry, store)


class TestBuildPriceFeed:
    def test_wires_settings(self, store):
        settings = Settings(_env_file=None, default_driver="brsapi", cache_enabled=True, cache_ttl=30)

        feed = build_price_feed(settings, cache=store)

        assert feed.registry.default_name == "brsapi"
        assert feed.cache_enabled is True
        assert feed.cache_ttl == 30
        assert feed.cache_store is store
        assert feed.registry.cache_store is store
        assert feed.get_available_drivers() == ["brsapi", "goldapi", "tgju", "tgn"]

    def test_creates_store_when_omitted(self):
        feed = build_price_feed(Settings(_env_file=None))
        assert isinstance(feed.cache_store, InMemoryCacheStore)


@patch('pricefeed.app.setup_logging')
class TestMain:
    @patch('pricefeed.app.build_price_feed')
    def test_list_drivers(self, mock_build, mock_logging, runner):
        mock_build.return_value.get_available_drivers.return_value = ["brsapi", "tgju"]

        result = runner.invoke(main, ["--list-drivers"])

        assert result.exit_code == 0
        assert result.stdout.split() == ["brsapi", "tgju"]

    @patch('pricefeed.app.build_price_feed')
    def test_supported(self, mock_build, mock_logging, runner, tgju_feed):
        mock_build.return_value = tgju_feed

        result = runner.invoke(main, ["--supported"])

        assert result.exit_code == 0
        assert "USD" in result.stdout.split()

    @patch('pricefeed.app.build_price_feed')
    def test_prints_price_json(self, mock_build, mock_logging, runner, tgju_feed, tgju_payload, make_response):
        mock_build.return_value = tgju_feed

        with patch('pricefeed.shared.http.requests.get') as mock_get:
            mock_get.return_value = make_response(tgju_payload)
            result = runner.invoke(main, ["usd"])

        assert result.exit_code == 0
        printed = json.loads(result.stdout)
        assert printed["currency"] == "USD"
        assert printed["price"] == 590000.0
        assert printed["unit"] == "IRR"

    @patch('pricefeed.app.build_price_feed')
    def test_error_exit_code(self, mock_build, mock_logging, runner, tgju_feed):
        mock_build.return_value = tgju_feed

        result = runner.invoke(main, ["XYZ"])

        assert result.exit_code == 1
        assert "Unknown currency" in result.output

    def test_no_currencies_is_usage_error(self, mock_logging, runner):
        result = runner.invoke(main, [])

        assert result.exit_code == 2
