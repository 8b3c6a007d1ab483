# src/pricefeed/adapters/providers/goldapi.py
"""
GoldAPI Provider for Precious Metal Spot Prices

GoldAPI prices one metal per request: GET {base_url}/{XAU|XAG|XPT|XPD}/{base}
with the API key in the x-access-token header. There is nothing to share
between currencies, so only the parsed-result cache applies.

Files that USE this module:
- pricefeed.application.registry (maps "goldapi" to GoldApiProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- pricefeed.adapters.providers.base (PriceProvider base class)
- pricefeed.domain (models and errors)
"""
import logging
from typing import Dict, Optional

from pricefeed.adapters.providers.base import PriceProvider, parse_optional, parse_price
from pricefeed.domain.errors import MalformedDataError, UpstreamError
from pricefeed.domain.models import Currency, CurrencyUnit, PriceData

log = logging.getLogger(__name__)

METAL_MAP: Dict[Currency, str] = {
    Currency.GOLD: "XAU",
    Currency.SILVER: "XAG",
    Currency.PLATINUM: "XPT",
    Currency.PALLADIUM: "XPD",
}


class GoldApiProvider(PriceProvider):
    """GoldAPI provider for gold, silver, platinum and palladium."""

    name = "goldapi"
    label = "GoldAPI"
    key_map = METAL_MAP
    requires_api_key = True
    raw_categories = ()

    def _auth_headers(self) -> Dict[str, str]:
        return {"x-access-token": self.api_key} if self.api_key else {}

    @property
    def base_currency(self) -> str:
        return str(self.options.get("base_currency") or "USD").upper()

    @property
    def quote_unit(self) -> Optional[CurrencyUnit]:
        try:
            return CurrencyUnit(self.base_currency)
        except ValueError:
            return None

    def _fetch_price(self, currency: Currency, key: str) -> PriceData:
        data = self._request_json(f"/{key}/{self.base_currency}")

        if not isinstance(data, dict):
            log.error("GoldAPI unexpected response type: %r", type(data))
            raise UpstreamError("GoldAPI returned non-dict JSON", adapter=self.name, currency=currency)
        if data.get("error"):
            log.error("GoldAPI error for %s: %s", key, data["error"])
            raise UpstreamError(f"GoldAPI error: {data['error']}", adapter=self.name, currency=currency)
        if data.get("price") is None:
            raise MalformedDataError(
                f"Unable to parse GoldAPI response: price missing for {currency.value}",
                adapter=self.name,
                currency=currency,
            )

        log.info("GoldAPI: %s/%s price=%s", key, self.base_currency, data["price"])
        return PriceData(
            currency=currency,
            price=parse_price(data["price"]),
            unit=self.quote_unit,
            symbol=key,
            change_24h=parse_optional(data.get("ch")),
            change_percentage_24h=parse_optional(data.get("chp")),
            high_24h=parse_optional(data.get("high_price")),
            low_24h=parse_optional(data.get("low_price")),
            timestamp=self._parse_unix(data.get("timestamp")),
            raw=dict(data),
        )
