# src/pricefeed/app.py
"""
Application Entry Point - Price Feed Wiring and CLI

This module serves as the composition root for the price feed. It wires the
cache store, provider registry and PriceFeed facade from settings, and
provides a small Click command for one-off lookups.

Files that USE this module:
- python -m pricefeed (module entry point)
- pricefeed console script
- tests.test_app (unit tests)

Files that this module USES:
- pricefeed.shared.logging_conf (setup_logging for logging configuration)
- pricefeed.config (settings for configuration management)
- pricefeed.adapters.cache (InMemoryCacheStore)
- pricefeed.application (ProviderRegistry and PriceFeed)
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional, Tuple

import click

from pricefeed.adapters.cache.store import CacheStore, InMemoryCacheStore
from pricefeed.application.price_feed import PriceFeed
from pricefeed.application.registry import ProviderRegistry
from pricefeed.config.settings import Settings
from pricefeed.domain.errors import PriceFeedError
from pricefeed.shared.logging_conf import setup_logging

log = logging.getLogger(__name__)


def build_price_feed(
    settings: Optional[Settings] = None,
    cache: Optional[CacheStore] = None,
) -> PriceFeed:
    """
    Build a PriceFeed from settings.

    Args:
        settings: Settings instance (the global settings when omitted)
        cache: Cache store shared by the facade and all providers
            (a fresh InMemoryCacheStore when omitted)

    Returns:
        Ready-to-use PriceFeed; providers are built on first use

    Raises:
        AdapterNotFoundError: If the default driver is not configured
    """
    if settings is None:
        # Import here so that building from explicit settings never reads the environment
        from pricefeed.config import settings

    store = cache if cache is not None else InMemoryCacheStore()
    registry = ProviderRegistry(
        settings.provider_configs(),
        store,
        default=settings.default_driver,
        strict=settings.strict_currencies,
    )
    return PriceFeed(
        registry,
        store,
        cache_enabled=settings.cache_enabled,
        cache_ttl=settings.cache_ttl,
        cache_prefix=settings.cache_prefix,
    )


@click.command(name="pricefeed")
@click.argument("currencies", nargs=-1)
@click.option("--driver", "-d", default=None, help="Driver name (default from PRICE_FEED_DRIVER).")
@click.option("--list-drivers", is_flag=True, help="List configured drivers and exit.")
@click.option("--supported", is_flag=True, help="List currencies supported by the driver and exit.")
def main(currencies: Tuple[str, ...], driver: Optional[str], list_drivers: bool, supported: bool) -> None:
    """Look up prices for CURRENCIES (e.g. USD BTC GOLD).

    Prints one JSON object per currency to stdout. Logs go to stderr so the
    output stays machine-readable.
    """
    from pricefeed.config import settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        console=settings.log_stdout,
        stream=sys.stderr,
    )

    if not (currencies or list_drivers or supported):
        raise click.UsageError("Give at least one CURRENCY, or --list-drivers / --supported")

    try:
        feed = build_price_feed(settings)

        if list_drivers:
            for name in feed.get_available_drivers():
                click.echo(name)
            return

        if supported:
            for currency in feed.get_supported_currencies(driver):
                click.echo(currency.value)
            return

        for symbol in currencies:
            data = feed.get_price(symbol, driver=driver)
            click.echo(json.dumps(data.to_dict(), ensure_ascii=False))
    except PriceFeedError as e:
        log.error("Price lookup failed: %s", e)
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
