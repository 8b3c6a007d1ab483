# src/pricefeed/adapters/providers/base.py
"""
Base Provider Interface for Price Providers

This module defines the abstract base class for all price providers. It
establishes the contract every provider implements (get_price, get_prices,
get_supported_currencies, supports, get_name) and holds the machinery they
share: HTTP fetch with error translation, the two cache layers, tolerant
number parsing and timestamp parsing.

Files that USE this module:
- pricefeed.adapters.providers.brsapi (BrsapiProvider extends PriceProvider)
- pricefeed.adapters.providers.goldapi (GoldApiProvider extends PriceProvider)
- pricefeed.adapters.providers.tgju (TgjuProvider extends PriceProvider)
- pricefeed.adapters.providers.tgn (TgnProvider extends PriceProvider)
- pricefeed.application.registry (constructs providers)
- tests.test_providers (unit tests)

Files that this module USES:
- pricefeed.adapters.cache.response_cache (ResponseCache)
- pricefeed.config.settings (ProviderConfig)
- pricefeed.domain (models and errors)
- pricefeed.shared.http (HttpClient)
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from datetime import datetime, timezone, tzinfo
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

from pricefeed.adapters.cache.response_cache import ResponseCache
from pricefeed.adapters.cache.store import CacheStore
from pricefeed.config.settings import ProviderConfig
from pricefeed.domain.errors import (
    ConfigurationError,
    PriceFeedError,
    UnsupportedCurrencyError,
    UpstreamError,
)
from pricefeed.domain.models import Currency, CurrencyUnit, PriceData
from pricefeed.shared.http import HttpClient
from pricefeed.shared.validators import validate_api_key

log = logging.getLogger(__name__)

_PERSIAN_DIGITS = str.maketrans("۰۱۲۳۴۵۶۷۸۹٠١٢٣٤٥٦٧٨٩", "01234567890123456789")


def parse_price(value: Any) -> float:
    """
    Convert an upstream numeric field to float.

    Grouping separators (',' and the Arabic '٬' / '،'), whitespace and
    Persian digits are handled. Missing, empty, unparseable or non-finite values
    become 0.0 instead of raising.

    Args:
        value: Number or string such as '1,125,050,000'

    Returns:
        Parsed float, or 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).translate(_PERSIAN_DIGITS)
        text = text.replace(",", "").replace("٬", "").replace("،", "").replace(" ", "").strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            log.debug("Unparseable numeric value %r, using 0.0", value)
            return 0.0

    # NaN and infinities are not prices
    if not math.isfinite(number):
        log.debug("Non-finite numeric value %r, using 0.0", value)
        return 0.0
    return number


def parse_optional(value: Any) -> Optional[float]:
    """Like parse_price, but a field that is absent stays None."""
    if value is None:
        return None
    return parse_price(value)


class PriceProvider(ABC):
    """
    Base class for price providers.

    Subclasses set ``name`` (registry name, used in cache keys), ``key_map``
    (Currency -> provider instrument key) and implement ``_fetch_price``.
    """

    name: ClassVar[str] = ""
    label: ClassVar[str] = ""  # Human readable provider name for messages
    unit: ClassVar[Optional[CurrencyUnit]] = None
    key_map: ClassVar[Mapping[Currency, Any]] = {}
    requires_api_key: ClassVar[bool] = False
    # Categories whose raw payload goes through the raw-response cache
    raw_categories: ClassVar[Tuple[Optional[str], ...]] = (None,)

    def __init__(
        self,
        config: ProviderConfig,
        cache_store: CacheStore,
        http: Optional[HttpClient] = None,
        strict: bool = False,
        name: Optional[str] = None,
    ):
        """
        Initialize provider.

        Args:
            config: Static provider configuration
            cache_store: Shared cache store (not owned by the provider)
            http: Optional HTTP client (built from config when omitted)
            strict: Raise instead of warn when configured currencies are
                missing from the key-map
            name: Registry name of this instance (defaults to the class name attribute)

        Raises:
            ConfigurationError: If base URL or required credentials are missing,
                or (strict only) configured currencies are not mapped
        """
        if name:
            self.name = name
        self.config = config
        self.base_url = config.base_url
        self.api_key = config.api_key
        self.options: Dict[str, Any] = dict(config.options)
        self.timeout = config.timeout
        self.supported_currencies: List[Currency] = list(config.currencies)

        if not self.base_url:
            raise ConfigurationError(f"{self.label} base_url is not configured", adapter=self.name)
        if self.requires_api_key and not validate_api_key(self.api_key):
            raise ConfigurationError(f"{self.label} API key is not configured", adapter=self.name)

        self.cache = ResponseCache(
            cache_store,
            adapter=self.name,
            prefix=config.cache_prefix,
            ttl_seconds=config.cache_ttl,
            enabled=config.cache_enabled,
        )
        self.http = http or self._build_http_client()
        self.tz = _zone(self.options.get("timezone"))

        unmapped = self.unmapped_currencies()
        if unmapped:
            symbols = ", ".join(c.value for c in unmapped)
            if strict:
                raise ConfigurationError(
                    f"Configured currencies have no {self.label} instrument: {symbols}",
                    adapter=self.name,
                )
            log.warning("%s: configured currencies without an instrument key: %s", self.name, symbols)

    # --- Public contract ---

    def get_price(self, currency: Currency) -> PriceData:
        """
        Get the price for a single currency (parsed-result cache applies).

        Args:
            currency: Currency to price

        Returns:
            PriceData with ``raw`` set to the upstream fragment

        Raises:
            UnsupportedCurrencyError: If the currency has no key-map entry
            UpstreamError: If the upstream call fails or lacks the instrument
            MalformedDataError: If the instrument has no price value
        """
        currency = Currency.parse(currency)
        key = self._instrument_key(currency)
        try:
            return self.cache.price(currency, lambda: self._fetch_price(currency, key))
        except PriceFeedError as e:
            raise e.with_context(self.name, currency)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            log.error("%s: unexpected response structure for %s: %s", self.name, currency, e)
            raise UpstreamError(
                f"Unexpected {self.label} response structure: {e}",
                adapter=self.name,
                currency=currency,
            ) from e

    def get_prices(self, currencies: Iterable[Currency]) -> Dict[Currency, PriceData]:
        """
        Get prices for several currencies, one get_price call each, in order.

        The first failing currency aborts the whole batch.
        """
        result: Dict[Currency, PriceData] = {}
        for currency in currencies:
            currency = Currency.parse(currency)
            result[currency] = self.get_price(currency)
        return result

    def get_supported_currencies(self) -> List[Currency]:
        """Configured currency list (not checked against the upstream)."""
        return list(self.supported_currencies)

    def supports(self, currency: Currency) -> bool:
        try:
            return Currency.parse(currency) in self.supported_currencies
        except UnsupportedCurrencyError:
            return False

    def get_name(self) -> str:
        return self.name

    def unmapped_currencies(self) -> List[Currency]:
        """Configured currencies the key-map cannot serve."""
        return [c for c in self.supported_currencies if c not in self.key_map]

    # --- Hooks ---

    @abstractmethod
    def _fetch_price(self, currency: Currency, key: Any) -> PriceData:
        """Fetch and parse one currency (called on a parsed-cache miss)."""
        raise NotImplementedError

    def _auth_headers(self) -> Dict[str, str]:
        """Headers carrying the API key; X-API-Key unless overridden."""
        if self.api_key:
            return {"X-API-Key": self.api_key}
        return {}

    def _auth_params(self) -> Dict[str, str]:
        """Query parameters carrying the API key; none unless overridden."""
        return {}

    # --- Shared helpers ---

    def _build_http_client(self) -> HttpClient:
        return HttpClient(
            self.base_url,
            timeout=self.timeout,
            retries=int(self.options.get("retries", 3)),
            retry_delay=float(self.options.get("retry_delay_ms", 100)) / 1000,
            headers=self._auth_headers(),
            params=self._auth_params(),
        )

    def _instrument_key(self, currency: Currency) -> Any:
        key = self.key_map.get(currency)
        if key is None:
            raise UnsupportedCurrencyError(
                f"Currency {currency.value} is not supported by {self.label}",
                adapter=self.name,
                currency=currency,
            )
        return key

    def _cached_payload(self, category: Optional[str], fetch: Callable[[], Any]) -> Any:
        """Raw-response cache: one upstream call per category per TTL window."""
        return self.cache.raw(category, fetch)

    def _request_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET path and decode the JSON body.

        Returns:
            Decoded JSON (dict or list)

        Raises:
            UpstreamError: On timeout, transport failure, non-2xx status or invalid JSON
        """
        try:
            log.info("Fetching fresh data from %s API", self.label)
            resp = self.http.get(path, params)
        except requests.exceptions.Timeout as e:
            log.error("%s API timeout after %s seconds", self.label, self.timeout)
            raise UpstreamError(f"{self.label} API timeout after {self.timeout}s", adapter=self.name) from e
        except requests.exceptions.RequestException as e:
            log.error("%s API request failed: %s", self.label, e)
            raise UpstreamError(f"{self.label} API request failed: {e}", adapter=self.name) from e

        if not 200 <= resp.status_code < 300:
            body = str(resp.text or "")[:200]
            log.error("%s API returned HTTP %d", self.label, resp.status_code)
            raise UpstreamError(
                f"{self.label} API request failed: HTTP {resp.status_code}: {body}",
                adapter=self.name,
            )

        try:
            return resp.json()
        except ValueError as e:
            log.error("%s API returned invalid JSON: %s", self.label, e)
            raise UpstreamError(f"{self.label} API returned invalid JSON: {e}", adapter=self.name) from e

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def _parse_timestamp(self, value: Any, fmt: Optional[str] = None) -> datetime:
        """
        Parse an upstream date-time string, falling back to fetch time.

        Args:
            value: Date-time string (e.g. '2024-01-01 10:00:00')
            fmt: strptime format; ISO-8601 parsing when omitted

        Returns:
            Timezone-aware datetime; naive values use the upstream time zone
        """
        if value is None or value == "":
            return self._now()
        try:
            text = str(value).strip()
            dt = datetime.strptime(text, fmt) if fmt else datetime.fromisoformat(text)
        except (TypeError, ValueError):
            log.debug("%s: unparseable timestamp %r, using fetch time", self.name, value)
            return self._now()
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=self.tz)
        return dt

    def _parse_unix(self, value: Any) -> datetime:
        """Parse a unix timestamp (seconds), falling back to fetch time."""
        if value is None or value == "":
            return self._now()
        try:
            return datetime.fromtimestamp(int(float(value)), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError):
            log.debug("%s: unparseable unix time %r, using fetch time", self.name, value)
            return self._now()


def _zone(name: Optional[str]) -> tzinfo:
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        log.warning("Unknown time zone %r, using UTC", name)
        return timezone.utc
