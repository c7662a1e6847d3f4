"""CoinMarketCap operations: JSON ticker API plus scraped market pages."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from coincapper.config.settings import get_settings
from coincapper.schemas.market import HistoricalDay, Listing, MarketPair, Ticker
from coincapper.services.extraction import (
    HISTORICAL_ROW_SELECTOR,
    LISTING_ROW_SELECTOR,
    MARKETS_ROW_SELECTOR,
    extract_row_elements,
    extract_rows,
    parse_document,
)
from coincapper.services.http import fetch
from coincapper.services.mappers import (
    HISTORICAL_COLUMNS,
    LISTING_MAPPERS,
    MARKET_PAIR_COLUMNS,
    map_historical_day,
    map_market_pair,
)
from coincapper.utils.parsing import QUERY_DATE_FORMAT, parse_date

logger = logging.getLogger("coincapper.dispatch")

INVALID_ID = {"error": "invalid id"}
INVALID_DATE_FORMAT = {"error": "invalid date format"}
INVALID_TYPE = {"error": "invalid type"}
LISTING_FAILURE_MESSAGE = "An unknown error occurred. Please submit a GitHub issue if problem continues."


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def build_query(**params: Any) -> str:
    """Encode the non-blank params with keys in sorted order."""
    present = {key: value for key, value in params.items() if not _blank(value)}
    return str(httpx.QueryParams(sorted(present.items())))


def build_url(root: str, path: str, **params: Any) -> str:
    url = f"{root}/{path.strip('/')}/"
    query = build_query(**params)
    return f"{url}?{query}" if query else url


def _get_json(url: str) -> Any:
    return json.loads(fetch(url).body)


def _get_document(url: str):
    return parse_document(fetch(url).body)


# ----------------------------
# JSON ticker API
# ----------------------------
def coins(
    limit: int = 0,
    rank: Optional[int] = None,
    currency: Optional[str] = None,
) -> list[Ticker] | dict[str, Any]:
    """
    Ticker listing. ``limit=0`` asks for every coin; ``rank`` is the first
    market-cap rank returned.
    """
    url = build_url(get_settings().API_URL, "ticker", limit=limit, start=rank, convert=currency)
    payload = _get_json(url)
    if isinstance(payload, dict):
        return payload
    return [Ticker(**item) for item in payload]


def coin_by_symbol(symbol: str) -> Optional[Ticker]:
    wanted = symbol.strip().casefold()
    url = build_url(get_settings().API_URL, "ticker", limit=0)
    payload = _get_json(url)
    if not isinstance(payload, list):
        logger.warning("ticker listing unavailable | %s", payload)
        return None

    for item in payload:
        if str(item.get("symbol") or "").strip().casefold() == wanted:
            return Ticker(**item)
    return None


def resolve_coin_id(id: Optional[str] = None, symbol: Optional[str] = None) -> Optional[str]:
    """
    Return the coin id to fetch, looking the symbol up when one is given.

    Raises ValueError before any request when neither is supplied; returns
    None when the symbol matches no ticker.
    """
    if _blank(id) and _blank(symbol):
        raise ValueError("id or symbol is required")

    if _blank(symbol):
        return id.strip()

    ticker = coin_by_symbol(symbol)
    if ticker is None:
        logger.info("symbol did not resolve | %s", symbol)
        return None
    return ticker.id


def coin(
    id: Optional[str] = None,
    currency: Optional[str] = None,
    *,
    symbol: Optional[str] = None,
) -> Ticker | dict[str, Any]:
    """
    Single ticker. Upstream error payloads (``{"error": "id not found"}``)
    are returned as they are.
    """
    coin_id = resolve_coin_id(id, symbol)
    if coin_id is None:
        return dict(INVALID_ID)

    payload = _get_json(build_url(get_settings().API_URL, f"ticker/{coin_id}", convert=currency))
    if isinstance(payload, list):
        payload = payload[0] if payload else {}
    if not isinstance(payload, dict) or "error" in payload or "id" not in payload:
        return payload
    return Ticker(**payload)


def global_stats(currency: Optional[str] = None) -> dict[str, Any]:
    return _get_json(build_url(get_settings().API_URL, "global", convert=currency))


# ----------------------------
# Scraped pages
# ----------------------------
def coin_markets(id: Optional[str] = None, symbol: Optional[str] = None) -> list[MarketPair] | dict[str, str]:
    coin_id = resolve_coin_id(id, symbol)
    if coin_id is None:
        return dict(INVALID_ID)

    document = _get_document(build_url(get_settings().BASE_URL, f"currencies/{coin_id}"))
    # message-only rows ("No data was found") span the table in a single cell
    rows = [cells for cells in extract_rows(document, MARKETS_ROW_SELECTOR) if len(cells) >= MARKET_PAIR_COLUMNS]
    if not rows:
        logger.info("markets table empty | %s", coin_id)
        return dict(INVALID_ID)

    return [map_market_pair(cells) for cells in rows]


def historical_price(
    id: Optional[str],
    start_date: str,
    end_date: str,
    *,
    symbol: Optional[str] = None,
) -> list[HistoricalDay] | dict[str, str]:
    """
    Daily OHLC rows between two ``YYYY-MM-DD`` dates, in page order
    (newest first on CoinMarketCap).
    """
    start = parse_date(start_date, QUERY_DATE_FORMAT)
    end = parse_date(end_date, QUERY_DATE_FORMAT)
    if start is None or end is None:
        return dict(INVALID_DATE_FORMAT)

    coin_id = resolve_coin_id(id, symbol)
    if coin_id is None:
        return dict(INVALID_ID)

    url = build_url(get_settings().BASE_URL, f"currencies/{coin_id}/historical-data", start=start, end=end)
    document = _get_document(url)
    rows = [cells for cells in extract_rows(document, HISTORICAL_ROW_SELECTOR) if len(cells) >= HISTORICAL_COLUMNS]
    if not rows:
        logger.info("historical table empty | %s | %s..%s", coin_id, start, end)
        return dict(INVALID_ID)

    return [map_historical_day(cells) for cells in rows]


def all_listings(type: str) -> list[Listing] | dict[str, str]:
    """
    Every coin or token on the "view all" page, in rank order.

    A failure while building the list returns a diagnostic payload instead
    of a partial list.
    """
    mapper = LISTING_MAPPERS.get(type)
    if mapper is None:
        return dict(INVALID_TYPE)

    try:
        document = _get_document(build_url(get_settings().BASE_URL, f"{type}/views/all"))
        return [mapper(row) for row in extract_row_elements(document, LISTING_ROW_SELECTOR)]
    except Exception as exc:
        logger.exception("listing extraction failed | %s", type)
        return {"message": LISTING_FAILURE_MESSAGE, "error": str(exc)}
