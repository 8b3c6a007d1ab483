# src/pricefeed/adapters/providers/tgn.py
"""
TGN Provider for Iranian Currency and Gold Coin Prices

TGN answers GET {base_url}/Pr/Get/{username}/{api_key} with one flat object
keyed by its own field names ("Dollar", "Euro", "SekehEmam", ...) plus a
shared "TimeRead" field ("2024/01/01 10:00:00") that dates every value in
the response. Prices are in Rial.

Files that USE this module:
- pricefeed.application.registry (maps "tgn" to TgnProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- pricefeed.adapters.providers.base (PriceProvider base class)
- pricefeed.domain (models and errors)
"""
import logging
from typing import Any, Dict

from pricefeed.adapters.providers.base import PriceProvider, parse_price
from pricefeed.domain.errors import ConfigurationError, MalformedDataError, UpstreamError
from pricefeed.domain.models import Currency, CurrencyUnit, PriceData

log = logging.getLogger(__name__)

C = Currency

KEY_MAP: Dict[Currency, str] = {
    # Fiat currencies
    C.USD: "Dollar",
    C.EUR: "Euro",
    C.AED: "Derham",
    # Gold and coins
    C.GOLD_OUNCE: "OunceTala",
    C.IR_GOLD_18: "YekGram18",
    C.IR_COIN_1G: "SekehGerami",
    C.IR_COIN_QUARTER: "SekehRob",
    C.IR_COIN_HALF: "SekehNim",
    C.IR_COIN_EMAMI: "SekehEmam",
    C.IR_COIN_BAHAR: "SekehTamam",
}

TIME_FIELD = "TimeRead"
TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


class TgnProvider(PriceProvider):
    """TGN provider; username and API key travel in the URL path."""

    name = "tgn"
    label = "TGN"
    unit = CurrencyUnit.IRR
    key_map = KEY_MAP
    requires_api_key = True

    def __init__(self, config, cache_store, http=None, strict=False, name=None):
        super().__init__(config, cache_store, http=http, strict=strict, name=name)
        self.username = config.username or ""
        if not self.username:
            raise ConfigurationError("TGN username is not configured", adapter=self.name)

    def _auth_headers(self) -> Dict[str, str]:
        return {}

    def get_latest_raw(self) -> Dict[str, Any]:
        """
        Get the raw JSON dictionary from TGN (with TTL cache).

        Raises:
            UpstreamError: If the request fails or returns non-dict JSON
        """
        return self._cached_payload(None, self._fetch_latest)

    def _fetch_latest(self) -> Dict[str, Any]:
        data = self._request_json(f"/Pr/Get/{self.username}/{self.api_key}")
        if not isinstance(data, dict):
            log.error("TGN unexpected response type: %r", type(data))
            raise UpstreamError("TGN returned non-dict JSON", adapter=self.name)
        log.info("TGN data updated (ttl=%ss)", self.cache.ttl_seconds)
        return data

    def _fetch_price(self, currency: Currency, key: str) -> PriceData:
        data = self.get_latest_raw()

        if key not in data:
            log.warning("%s (key: %s) not found in TGN response", currency, key)
            raise UpstreamError(
                f"Currency {currency.value} (key: {key}) not found in TGN response",
                adapter=self.name,
                currency=currency,
            )
        value = data[key]
        if value is None:
            raise MalformedDataError(
                f"Price data is null for {currency.value}",
                adapter=self.name,
                currency=currency,
            )

        return PriceData(
            currency=currency,
            price=parse_price(value),
            unit=self.unit,
            symbol=currency.value,
            timestamp=self._parse_timestamp(data.get(TIME_FIELD), TIME_FORMAT),
            raw={key: value, TIME_FIELD: data.get(TIME_FIELD)},
        )
