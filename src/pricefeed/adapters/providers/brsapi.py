# src/pricefeed/adapters/providers/brsapi.py
"""
BRS API Provider for Iranian Market Data

This module implements the BRS API client. BRS API splits its data over
categorized endpoints:
- Cryptocurrency.php: a list of coins, prices in Toman
- Gold_Currency.php: {"gold": [...], "currency": [...]}, prices in Toman
- Commodity.php: {"metal_precious": [...], ...}, prices in USD

Each currency is routed to one category through the key-map. The raw payload
of a category is cached once per TTL window, so pricing many currencies of
the same category costs a single upstream call.

Files that USE this module:
- pricefeed.application.registry (maps "brsapi" to BrsapiProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- pricefeed.adapters.providers.base (PriceProvider base class)
- pricefeed.domain (models and errors)
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional

from pricefeed.adapters.providers.base import PriceProvider, parse_optional, parse_price
from pricefeed.domain.errors import MalformedDataError, UpstreamError
from pricefeed.domain.models import Currency, CurrencyUnit, PriceData

log = logging.getLogger(__name__)


class BrsapiKey(NamedTuple):
    """Instrument key: which category endpoint, and what to match in it."""
    category: str
    key: str


C = Currency

KEY_MAP: Dict[Currency, BrsapiKey] = {
    # Cryptocurrencies (matched on name_en)
    C.BTC: BrsapiKey("crypto", "Bitcoin"),
    C.ETH: BrsapiKey("crypto", "Ethereum"),
    C.USDT: BrsapiKey("crypto", "Tether"),
    C.BNB: BrsapiKey("crypto", "Binance Coin"),
    C.XRP: BrsapiKey("crypto", "XRP"),
    C.ADA: BrsapiKey("crypto", "Cardano"),
    C.DOGE: BrsapiKey("crypto", "Dogecoin"),
    C.SOL: BrsapiKey("crypto", "Solana"),
    C.TRX: BrsapiKey("crypto", "TRON"),
    C.DOT: BrsapiKey("crypto", "Polkadot"),
    C.LTC: BrsapiKey("crypto", "Litecoin"),
    C.SHIB: BrsapiKey("crypto", "SHIBA INU"),
    C.AVAX: BrsapiKey("crypto", "Avalanche"),
    C.UNI: BrsapiKey("crypto", "Uniswap"),
    C.LINK: BrsapiKey("crypto", "Chainlink"),
    C.MATIC: BrsapiKey("crypto", "Polygon Ecosystem Token"),
    # Fiat currencies (symbol contains key)
    C.USD: BrsapiKey("currency", "USD"),
    C.EUR: BrsapiKey("currency", "EUR"),
    C.GBP: BrsapiKey("currency", "GBP"),
    C.JPY: BrsapiKey("currency", "JPY"),
    C.CNY: BrsapiKey("currency", "CNY"),
    C.AUD: BrsapiKey("currency", "AUD"),
    C.CAD: BrsapiKey("currency", "CAD"),
    C.CHF: BrsapiKey("currency", "CHF"),
    C.AED: BrsapiKey("currency", "AED"),
    C.TRY: BrsapiKey("currency", "TRY"),
    # Gold (exact symbol) and metals from the commodity endpoint
    C.GOLD: BrsapiKey("gold", "IR_GOLD_18K"),
    C.IR_GOLD_18: BrsapiKey("gold", "IR_GOLD_18K"),
    C.SILVER: BrsapiKey("commodity", "XAGUSD"),
    C.PLATINUM: BrsapiKey("commodity", "XPTUSD"),
    C.PALLADIUM: BrsapiKey("commodity", "XPDUSD"),
}

ENDPOINTS: Dict[str, str] = {
    "crypto": "/Api/Market/Cryptocurrency.php",
    "gold": "/Api/Market/Gold_Currency.php",
    "currency": "/Api/Market/Gold_Currency.php",
    "commodity": "/Api/Market/Commodity.php",
}

UNITS: Dict[str, CurrencyUnit] = {
    "crypto": CurrencyUnit.IRT,
    "gold": CurrencyUnit.IRT,
    "currency": CurrencyUnit.IRT,
    "commodity": CurrencyUnit.USD,
}


class BrsapiProvider(PriceProvider):
    """BRS API provider for crypto, fiat, gold and precious metal prices."""

    name = "brsapi"
    label = "BRS"
    key_map = KEY_MAP
    requires_api_key = True
    raw_categories = tuple(ENDPOINTS)

    def _auth_headers(self) -> Dict[str, str]:
        # Key goes in the query string
        return {}

    def _auth_params(self) -> Dict[str, str]:
        return {"key": self.api_key} if self.api_key else {}

    def get_category_payload(self, category: str) -> Any:
        """
        Get the raw payload of one category (with TTL cache).

        Args:
            category: One of "crypto", "gold", "currency", "commodity"

        Returns:
            List (crypto) or dict (other categories) as returned by BRS API

        Raises:
            UpstreamError: If the request fails or the payload has the wrong shape
        """
        return self._cached_payload(category, lambda: self._fetch_category(category))

    def _fetch_category(self, category: str) -> Any:
        endpoint = ENDPOINTS.get(category)
        if endpoint is None:
            raise UpstreamError(f"Unknown BRS API category: {category}", adapter=self.name)

        data = self._request_json(endpoint)

        if category == "crypto":
            if not isinstance(data, list):
                log.error("BRS API crypto endpoint returned %r instead of a list", type(data))
                raise UpstreamError("BRS API crypto response is not a list", adapter=self.name)
            log.info("BRS API crypto data updated (%d coins, ttl=%ss)", len(data), self.cache.ttl_seconds)
            return data

        # The API returns a list with one object, or a direct object
        if isinstance(data, list) and data and isinstance(data[0], dict):
            data = data[0]
        if not isinstance(data, dict):
            log.error("BRS API unexpected response type: %r", type(data))
            raise UpstreamError("BRS API returned non-dict JSON", adapter=self.name)

        log.info("BRS API %s data updated (ttl=%ss)", category, self.cache.ttl_seconds)
        return data

    @staticmethod
    def _find_item(data: Any, mapping: BrsapiKey) -> Optional[Dict[str, Any]]:
        """
        Find the instrument in a category payload.

        Matching rules differ per category: exact English name for crypto,
        exact symbol for gold, symbol contains key for currency, and
        case-insensitive symbol contains key for commodity.
        """
        category, key = mapping
        items: List[Any]

        if category == "crypto":
            items = data if isinstance(data, list) else []
            for item in items:
                if isinstance(item, dict) and item.get("name_en") == key:
                    return item
            return None

        if category == "gold":
            for item in data.get("gold") or []:
                if isinstance(item, dict) and item.get("symbol") == key:
                    return item
            return None

        if category == "currency":
            for item in data.get("currency") or []:
                if isinstance(item, dict) and key in str(item.get("symbol") or ""):
                    return item
            return None

        if category == "commodity":
            search = key.lower()
            for item in data.get("metal_precious") or []:
                if isinstance(item, dict) and search in str(item.get("symbol") or "").lower():
                    return item
            return None

        return None

    def _fetch_price(self, currency: Currency, key: BrsapiKey) -> PriceData:
        data = self.get_category_payload(key.category)
        item = self._find_item(data, key)

        if item is None:
            log.warning("%s (key: %s, type: %s) not found in BRS API response", currency, key.key, key.category)
            raise UpstreamError(
                f"Currency {currency.value} (key: {key.key}, type: {key.category}) not found in BRS API response",
                adapter=self.name,
                currency=currency,
            )

        raw_price = item.get("price")
        if key.category == "crypto" and item.get("price_toman") is not None:
            raw_price = item.get("price_toman")
        if raw_price is None:
            raise MalformedDataError(
                f"Price data is null for {currency.value}",
                adapter=self.name,
                currency=currency,
            )

        return PriceData(
            currency=currency,
            price=parse_price(raw_price),
            unit=UNITS[key.category],
            symbol=currency.value,
            change_24h=parse_optional(item.get("change_value")),
            change_percentage_24h=parse_optional(item.get("change_percent")),
            market_cap=parse_optional(item.get("market_cap")),
            timestamp=self._parse_unix(item.get("time_unix")),
            raw=dict(item),
        )
