"""Pydantic records produced from CoinMarketCap responses and pages."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, computed_field, model_validator

from coincapper.utils.parsing import parse_amount


_NUMERIC_PREFIXES = ("price_", "market_cap_", "volume_", "percent_change_")


def _normalize_ticker_key(key: str) -> str:
    # "24h_volume_usd" -> "volume_usd_24h"
    if key.startswith("24h_"):
        return f"{key[4:]}_24h"
    return key


class Ticker(BaseModel):
    """One coin's snapshot from the JSON ticker API."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    name: Optional[str] = None
    symbol: Optional[str] = None
    rank: Optional[int] = None
    price_usd: Optional[float] = None
    price_btc: Optional[float] = None
    volume_usd_24h: Optional[float] = None
    market_cap_usd: Optional[float] = None
    available_supply: Optional[float] = None
    total_supply: Optional[float] = None
    max_supply: Optional[float] = None
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None
    last_updated: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        out: dict[str, Any] = {}
        for key, value in data.items():
            name = _normalize_ticker_key(str(key))
            # numbers arrive as strings, converted-currency extras ("price_eur") included
            if isinstance(value, str) and name.startswith(_NUMERIC_PREFIXES):
                value = parse_amount(value)
            out[name] = value
        return out


class MarketPair(BaseModel):
    """One exchange/trading-pair row of a coin's markets table."""

    model_config = ConfigDict(frozen=True)

    source: str
    pair: str
    volume_usd: float
    price_usd: float
    volume_percentage: float
    last_updated: str


class HistoricalDay(BaseModel):
    """One day of OHLC data; ``average`` is derived from high and low."""

    model_config = ConfigDict(frozen=True)

    date: Optional[str]
    open: float
    high: float
    low: float
    close: float
    volume: float
    market_cap: float

    @computed_field
    @property
    def average(self) -> float:
        return (self.high + self.low) / 2


class Listing(BaseModel):
    """
    One row of the all coins/tokens table.

    The record is sparse: fields missing from the page are never set, and
    ``to_record`` only emits the fields that were.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    rank: Optional[int] = None
    name: Optional[str] = None
    symbol: Optional[str] = None
    platform: Optional[str] = None
    market_cap_usd: Optional[float] = None
    market_cap_btc: Optional[float] = None
    price_usd: Optional[float] = None
    price_btc: Optional[float] = None
    circulating_supply: Optional[float] = None
    volume_usd_24h: Optional[float] = None
    volume_btc_24h: Optional[float] = None
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None

    @model_validator(mode="after")
    def _symbol_xor_platform(self) -> "Listing":
        if self.symbol is not None and self.platform is not None:
            raise ValueError("a listing carries either symbol or platform, not both")
        return self

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
