# src/pricefeed/adapters/providers/tgju.py
"""
TGJU Provider for Iranian Market Data

This module implements the client for TGJU's public ajax.json feed. The feed
returns every instrument at once under "current", each as a small object:

  {"p": "590,000", "h": "591,000", "l": "589,000", "d": "1,000",
   "dp": 0.17, "ts": "2024-01-01 10:00:00"}

The whole payload is cached once per TTL window and every currency is looked
up in it, so a batch of currencies costs one upstream call. Prices are in
Rial.

Files that USE this module:
- pricefeed.application.registry (maps "tgju" to TgjuProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- pricefeed.adapters.providers.base (PriceProvider base class)
- pricefeed.domain (models and errors)
"""
import logging
from typing import Any, Dict

from pricefeed.adapters.providers.base import PriceProvider, parse_optional, parse_price
from pricefeed.domain.errors import MalformedDataError, UpstreamError
from pricefeed.domain.models import Currency, CurrencyUnit, PriceData

log = logging.getLogger(__name__)

C = Currency

KEY_MAP: Dict[Currency, str] = {
    # Cryptocurrencies (in IRR); MATIC has no IRR market on TGJU
    C.BTC: "btc-irr",
    C.ETH: "eth-irr",
    C.USDT: "usdt-irr",
    C.BNB: "crypto-binance-coin-irr",
    C.XRP: "xrp-irr",
    C.ADA: "crypto-cardano-irr",
    C.DOGE: "crypto-dogecoin-irr",
    C.SOL: "crypto-solana-irr",
    C.TRX: "crypto-tron-irr",
    C.DOT: "crypto-polkadot-irr",
    C.LTC: "crypto-litecoin-irr",
    C.SHIB: "crypto-shiba-inu-irr",
    C.AVAX: "crypto-avalanche-irr",
    C.UNI: "crypto-uniswap",
    C.LINK: "crypto-chainlink-irr",
    # Fiat currencies
    C.USD: "price_dollar_rl",
    C.EUR: "price_eur",
    C.GBP: "price_gbp",
    C.JPY: "usd-jpy-ask",
    C.CNY: "usd-cny-ask",
    C.AUD: "price_aud",
    C.CAD: "usd-cad-ask",
    C.CHF: "usd-chf-ask",
    C.AED: "price_aed",
    C.TRY: "price_try",
    # Precious metals (in IRR)
    C.GOLD: "geram18",  # 18k gold per gram
    C.IR_GOLD_18: "geram18",
    C.SILVER: "silver",  # per ounce
}

# Cross rates quoted against USD rather than in Rial
CROSS_RATE_PREFIX = "usd-"


class TgjuProvider(PriceProvider):
    """TGJU provider (free public API, no authentication)."""

    name = "tgju"
    label = "TGJU"
    unit = CurrencyUnit.IRR
    key_map = KEY_MAP

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    def get_latest_raw(self) -> Dict[str, Any]:
        """
        Get the raw JSON dictionary from TGJU (with TTL cache).

        Returns:
            Dictionary with a "current" mapping of instrument key to data

        Raises:
            UpstreamError: If the request fails or "current" is missing
        """
        return self._cached_payload(None, self._fetch_latest)

    def _fetch_latest(self) -> Dict[str, Any]:
        data = self._request_json("/ajax.json")

        if not isinstance(data, dict):
            log.error("TGJU unexpected response type: %r", type(data))
            raise UpstreamError("TGJU returned non-dict JSON", adapter=self.name)
        if not isinstance(data.get("current"), dict):
            log.error("TGJU response missing 'current' section")
            raise UpstreamError("TGJU response missing 'current' section", adapter=self.name)

        log.info("TGJU data updated (%d instruments, ttl=%ss)", len(data["current"]), self.cache.ttl_seconds)
        return data

    def _fetch_price(self, currency: Currency, key: str) -> PriceData:
        data = self.get_latest_raw()
        instrument = data["current"].get(key)

        if not isinstance(instrument, dict):
            log.warning("%s (key: %s) not found in TGJU response", currency, key)
            raise UpstreamError(
                f"Currency {currency.value} (key: {key}) not found in TGJU response",
                adapter=self.name,
                currency=currency,
            )

        if instrument.get("p") is None:
            raise MalformedDataError(
                f"Price data is null for {currency.value}",
                adapter=self.name,
                currency=currency,
            )

        dp = instrument.get("dp")

        return PriceData(
            currency=currency,
            price=parse_price(instrument["p"]),
            unit=None if key.startswith(CROSS_RATE_PREFIX) else self.unit,
            symbol=currency.value,
            change_24h=parse_optional(instrument.get("d")),
            change_percentage_24h=None if dp is None else parse_price(dp),
            high_24h=parse_optional(instrument.get("h")),
            low_24h=parse_optional(instrument.get("l")),
            timestamp=self._parse_timestamp(instrument.get("ts")),
            raw=dict(instrument),
        )
