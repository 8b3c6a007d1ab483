# src/pricefeed/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains the provider-independent domain models:
- Currency: the closed set of canonical instruments (crypto, fiat, metals/coins)
- CurrencyUnit: the unit a price is quoted in (Rial, Toman, USD, EUR)
- PriceData: one normalized price quote

Files that USE this module:
- pricefeed.adapters.providers.* (build PriceData from upstream payloads)
- pricefeed.adapters.cache.* (cache keys are built from Currency values)
- pricefeed.application.* (registry and facade accept Currency arguments)
- pricefeed.config.settings (ProviderConfig.currencies)
- tests.* (tests use domain models for test data)

Files that this module USES:
- pricefeed.domain.errors (Currency.parse raises UnsupportedCurrencyError)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional

from pricefeed.domain.errors import UnsupportedCurrencyError


class Currency(str, Enum):
    """Canonical, provider-independent instrument identifier."""

    # Cryptocurrencies
    BTC = "BTC"
    ETH = "ETH"
    USDT = "USDT"
    BNB = "BNB"
    XRP = "XRP"
    ADA = "ADA"
    DOGE = "DOGE"
    SOL = "SOL"
    TRX = "TRX"
    DOT = "DOT"
    MATIC = "MATIC"
    LTC = "LTC"
    SHIB = "SHIB"
    AVAX = "AVAX"
    UNI = "UNI"
    LINK = "LINK"

    # Fiat currencies
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    CNY = "CNY"
    AUD = "AUD"
    CAD = "CAD"
    CHF = "CHF"
    IRR = "IRR"
    AED = "AED"
    TRY = "TRY"

    # Precious metals
    GOLD = "GOLD"
    SILVER = "SILVER"
    PLATINUM = "PLATINUM"
    PALLADIUM = "PALLADIUM"

    # Gold by weight and Iranian gold coins
    GOLD_OUNCE = "GOLD_OUNCE"
    IR_GOLD_18 = "IR_GOLD_18"
    IR_COIN_1G = "IR_COIN_1G"
    IR_COIN_QUARTER = "IR_COIN_QUARTER"
    IR_COIN_HALF = "IR_COIN_HALF"
    IR_COIN_EMAMI = "IR_COIN_EMAMI"
    IR_COIN_BAHAR = "IR_COIN_BAHAR"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def cases(cls) -> List["Currency"]:
        """Return every known currency in declaration order."""
        return list(cls)

    @classmethod
    def cryptocurrencies(cls) -> FrozenSet["Currency"]:
        return _CRYPTO

    @classmethod
    def fiat_currencies(cls) -> FrozenSet["Currency"]:
        return _FIAT

    @classmethod
    def precious_metals(cls) -> FrozenSet["Currency"]:
        """Metals, gold by weight and gold coins."""
        return _PRECIOUS_METALS

    @classmethod
    def parse(cls, value: Any) -> "Currency":
        """
        Resolve a symbol such as "usd" or "BTC" to a Currency.

        Args:
            value: Currency instance or case-insensitive symbol string

        Returns:
            Matching Currency member

        Raises:
            UnsupportedCurrencyError: If the symbol is not a known currency
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnsupportedCurrencyError(f"Unknown currency {value!r}") from None

    def is_crypto(self) -> bool:
        return self in _CRYPTO

    def is_fiat(self) -> bool:
        return self in _FIAT

    def is_precious_metal(self) -> bool:
        return self in _PRECIOUS_METALS


_CRYPTO: FrozenSet[Currency] = frozenset({
    Currency.BTC, Currency.ETH, Currency.USDT, Currency.BNB,
    Currency.XRP, Currency.ADA, Currency.DOGE, Currency.SOL,
    Currency.TRX, Currency.DOT, Currency.MATIC, Currency.LTC,
    Currency.SHIB, Currency.AVAX, Currency.UNI, Currency.LINK,
})

_FIAT: FrozenSet[Currency] = frozenset({
    Currency.USD, Currency.EUR, Currency.GBP, Currency.JPY,
    Currency.CNY, Currency.AUD, Currency.CAD, Currency.CHF,
    Currency.IRR, Currency.AED, Currency.TRY,
})

_PRECIOUS_METALS: FrozenSet[Currency] = frozenset({
    Currency.GOLD, Currency.SILVER, Currency.PLATINUM, Currency.PALLADIUM,
    Currency.GOLD_OUNCE, Currency.IR_GOLD_18, Currency.IR_COIN_1G,
    Currency.IR_COIN_QUARTER, Currency.IR_COIN_HALF,
    Currency.IR_COIN_EMAMI, Currency.IR_COIN_BAHAR,
})


class CurrencyUnit(str, Enum):
    """Unit a price is quoted in."""

    IRR = "IRR"  # Iranian Rial
    IRT = "IRT"  # Iranian Toman (10 Rial)
    USD = "USD"
    EUR = "EUR"

    def __str__(self) -> str:
        return self.value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PriceData:
    """
    One normalized price quote.

    Attributes:
        currency: Canonical currency this quote is for
        price: Price in ``unit`` (Toman, Rial or USD depending on provider)
        unit: Quoting unit, if the provider makes it known
        symbol: Symbol reported for the instrument (e.g. "BTC", "XAU")
        change_24h: Absolute 24h change
        change_percentage_24h: 24h change in percent
        high_24h: 24h high
        low_24h: 24h low
        volume_24h: 24h traded volume
        market_cap: Market capitalization
        timestamp: Upstream quote time, or fetch time when upstream has none
        raw: Untransformed upstream fragment for this instrument
    """
    currency: Currency
    price: float
    unit: Optional[CurrencyUnit] = None
    symbol: Optional[str] = None
    change_24h: Optional[float] = None
    change_percentage_24h: Optional[float] = None
    high_24h: Optional[float] = None
    low_24h: Optional[float] = None
    volume_24h: Optional[float] = None
    market_cap: Optional[float] = None
    timestamp: Optional[datetime] = field(default_factory=_utcnow)
    raw: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.timestamp is None:
            object.__setattr__(self, "timestamp", _utcnow())

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            Dictionary with enum values as strings and an ISO timestamp
        """
        d = asdict(self)
        d["currency"] = self.currency.value
        d["unit"] = self.unit.value if self.unit else None
        d["timestamp"] = self.timestamp.isoformat()
        return d
