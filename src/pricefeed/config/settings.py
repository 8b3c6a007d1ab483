# src/pricefeed/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Global options (default driver, facade cache, HTTP behaviour, logging) and
per-provider options (credentials, cache TTL) are read from environment
variables or a .env file, then assembled into one ProviderConfig per driver.

Files that USE this module:
- pricefeed.app (builds the PriceFeed from settings)
- pricefeed.adapters.providers.* (ProviderConfig drives every provider)
- pricefeed.application.* (registry and facade read the driver table)

Files that this module USES:
- pricefeed.domain.models (Currency for supported-currency lists)
- pricefeed.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pricefeed.domain.errors import UnsupportedCurrencyError
from pricefeed.domain.models import Currency
from pricefeed.shared.validators import (
    validate_api_key,
    validate_base_url,
    validate_cache_prefix,
)

# Closed set of provider implementations; the registry maps each to a class.
DriverName = Literal["brsapi", "goldapi", "tgju", "tgn"]

DEFAULT_CACHE_PREFIX = "price_feed"

C = Currency

BRSAPI_CURRENCIES = [
    # Cryptocurrencies (prices in Toman)
    C.BTC, C.ETH, C.USDT, C.BNB, C.XRP, C.ADA, C.DOGE, C.SOL,
    C.TRX, C.DOT, C.LTC, C.SHIB, C.AVAX, C.UNI, C.LINK, C.MATIC,
    # Fiat currencies (exchange rates to Toman)
    C.USD, C.EUR, C.GBP, C.JPY, C.CNY, C.AUD, C.CAD, C.CHF, C.AED, C.TRY,
    # Precious metals
    C.GOLD, C.SILVER, C.PLATINUM, C.PALLADIUM,
]

GOLDAPI_CURRENCIES = [C.GOLD, C.SILVER, C.PLATINUM, C.PALLADIUM]

TGJU_CURRENCIES = [
    # Fiat currencies (exchange rates to Rial)
    C.USD, C.EUR, C.GBP, C.JPY, C.CNY, C.AUD, C.CAD, C.CHF, C.AED, C.TRY,
    # Precious metals (in Rial)
    C.GOLD, C.SILVER,
]

TGN_CURRENCIES = [
    C.USD, C.EUR, C.AED,
    C.GOLD_OUNCE, C.IR_GOLD_18,
    C.IR_COIN_1G, C.IR_COIN_QUARTER, C.IR_COIN_HALF, C.IR_COIN_EMAMI, C.IR_COIN_BAHAR,
]


class ProviderConfig(BaseModel):
    """
    Static configuration for one price provider.

    The ``currencies`` list is what supports() and get_supported_currencies()
    answer from. It is not checked against the provider's key-map here.
    """

    model_config = ConfigDict(frozen=True)

    driver: DriverName
    base_url: str = ""
    api_key: Optional[str] = None
    username: Optional[str] = None
    cache_enabled: bool = True
    cache_ttl: int = Field(default=60, ge=0)
    cache_prefix: str = DEFAULT_CACHE_PREFIX
    currencies: List[Currency] = Field(default_factory=list)
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL format; empty means 'not configured'."""
        if v and not validate_base_url(v):
            raise ValueError(f"Invalid base_url {v!r}")
        return v.rstrip("/")

    @field_validator("api_key", "username")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("cache_prefix")
    @classmethod
    def validate_cache_prefix(cls, v: str) -> str:
        if not validate_cache_prefix(v):
            raise ValueError(f"Invalid cache_prefix {v!r}")
        return v

    @field_validator("currencies", mode="before")
    @classmethod
    def parse_currencies(cls, v: Any) -> List[Currency]:
        """Accept Currency members or symbol strings ("USD", "btc")."""
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        try:
            return [Currency.parse(item) for item in v]
        except UnsupportedCurrencyError as e:
            raise ValueError(e.message) from e

    @property
    def timeout(self) -> float:
        """HTTP timeout in seconds (options['timeout'], default 10)."""
        return float(self.options.get("timeout", 10))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Facade ---
    default_driver: DriverName = Field(default="tgju", alias="PRICE_FEED_DRIVER")
    cache_enabled: bool = Field(default=False, alias="PRICE_FEED_CACHE_ENABLED")
    cache_ttl: int = Field(default=60, alias="PRICE_FEED_CACHE_TTL", ge=0)
    cache_prefix: str = Field(default=DEFAULT_CACHE_PREFIX, alias="PRICE_FEED_CACHE_PREFIX")
    strict_currencies: bool = Field(default=False, alias="PRICE_FEED_STRICT_CURRENCIES")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)
    http_retries: int = Field(default=3, alias="HTTP_RETRIES", ge=1, le=10)
    http_retry_delay_ms: int = Field(default=100, alias="HTTP_RETRY_DELAY_MS", ge=0, le=10_000)
    upstream_timezone: str = Field(default="Asia/Tehran", alias="UPSTREAM_TIMEZONE")

    # --- BRS API ---
    brsapi_api_key: str = Field(default="", alias="BRSAPI_API_KEY")
    brsapi_base_url: str = Field(default="https://brsapi.ir", alias="BRSAPI_BASE_URL")
    brsapi_cache_enabled: bool = Field(default=True, alias="BRSAPI_CACHE_ENABLED")
    brsapi_cache_ttl: int = Field(default=120, alias="BRSAPI_CACHE_TTL", ge=0)  # 2 minutes

    # --- GoldAPI ---
    goldapi_api_key: str = Field(default="", alias="GOLDAPI_API_KEY")
    goldapi_base_url: str = Field(default="https://www.goldapi.io/api", alias="GOLDAPI_BASE_URL")
    goldapi_cache_enabled: bool = Field(default=True, alias="GOLDAPI_CACHE_ENABLED")
    goldapi_cache_ttl: int = Field(default=300, alias="GOLDAPI_CACHE_TTL", ge=0)  # 5 minutes
    goldapi_base_currency: str = Field(default="USD", alias="GOLDAPI_BASE_CURRENCY")

    # --- TGJU (free public API) ---
    tgju_api_key: str = Field(default="", alias="TGJU_API_KEY")
    tgju_base_url: str = Field(default="https://call5.tgju.org", alias="TGJU_BASE_URL")
    tgju_cache_enabled: bool = Field(default=True, alias="TGJU_CACHE_ENABLED")
    tgju_cache_ttl: int = Field(default=120, alias="TGJU_CACHE_TTL", ge=0)

    # --- TGN (credentials in URL path) ---
    tgn_base_url: str = Field(default="", alias="TGN_BASE_URL")
    tgn_username: str = Field(default="", alias="TGN_USERNAME")
    tgn_api_key: str = Field(default="", alias="TGN_API_KEY")
    tgn_cache_enabled: bool = Field(default=True, alias="TGN_CACHE_ENABLED")
    tgn_cache_ttl: int = Field(default=120, alias="TGN_CACHE_TTL", ge=0)

    # --- Logging (for server deployment) ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="PRICEFEED_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("cache_prefix")
    @classmethod
    def validate_cache_prefix(cls, v: str) -> str:
        """Validate cache prefix format."""
        if not validate_cache_prefix(v):
            raise ValueError("Invalid PRICE_FEED_CACHE_PREFIX format")
        return v

    @field_validator("brsapi_api_key", "goldapi_api_key", "tgn_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key format; empty means 'not configured'."""
        if v and not validate_api_key(v):
            raise ValueError("Invalid API key format")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v

    def _http_options(self) -> Dict[str, Any]:
        return {
            "timeout": self.http_timeout_seconds,
            "retries": self.http_retries,
            "retry_delay_ms": self.http_retry_delay_ms,
            "timezone": self.upstream_timezone,
        }

    def provider_configs(self) -> Dict[str, ProviderConfig]:
        """
        Build the driver table.

        Returns:
            Mapping of driver name to its ProviderConfig, in a stable order
        """
        return {
            "brsapi": ProviderConfig(
                driver="brsapi",
                base_url=self.brsapi_base_url,
                api_key=self.brsapi_api_key,
                cache_enabled=self.brsapi_cache_enabled,
                cache_ttl=self.brsapi_cache_ttl,
                cache_prefix=self.cache_prefix,
                currencies=BRSAPI_CURRENCIES,
                options=self._http_options(),
            ),
            "goldapi": ProviderConfig(
                driver="goldapi",
                base_url=self.goldapi_base_url,
                api_key=self.goldapi_api_key,
                cache_enabled=self.goldapi_cache_enabled,
                cache_ttl=self.goldapi_cache_ttl,
                cache_prefix=self.cache_prefix,
                currencies=GOLDAPI_CURRENCIES,
                options={**self._http_options(), "base_currency": self.goldapi_base_currency},
            ),
            "tgju": ProviderConfig(
                driver="tgju",
                base_url=self.tgju_base_url,
                api_key=self.tgju_api_key,
                cache_enabled=self.tgju_cache_enabled,
                cache_ttl=self.tgju_cache_ttl,
                cache_prefix=self.cache_prefix,
                currencies=TGJU_CURRENCIES,
                options=self._http_options(),
            ),
            "tgn": ProviderConfig(
                driver="tgn",
                base_url=self.tgn_base_url,
                username=self.tgn_username,
                api_key=self.tgn_api_key,
                cache_enabled=self.tgn_cache_enabled,
                cache_ttl=self.tgn_cache_ttl,
                cache_prefix=self.cache_prefix,
                currencies=TGN_CURRENCIES,
                options=self._http_options(),
            ),
        }


# Global settings instance
settings = Settings()
