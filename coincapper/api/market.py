# coincapper/api/market.py
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from coincapper.schemas.market import Listing
from coincapper.services import coinmarketcap
from coincapper.services.http import UpstreamError


router = APIRouter(tags=["market"])

logger = logging.getLogger("coincapper.api")


def _error_response(
    *,
    code: str,
    message: str,
    status_code: int = 400,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=payload)


def _serialize(result: Any) -> Any:
    if isinstance(result, Listing):
        return result.to_record()
    if isinstance(result, BaseModel):
        return result.model_dump()
    if isinstance(result, list):
        return [_serialize(item) for item in result]
    return result


def _call(operation, /, *args: Any, **kwargs: Any) -> Any:
    try:
        return _serialize(operation(*args, **kwargs))
    except ValueError as exc:
        return _error_response(code="invalid_argument", message=str(exc))
    except UpstreamError as exc:
        logger.warning("upstream unavailable | %s", exc.url)
        return _error_response(
            code="upstream_unavailable",
            message=str(exc),
            status_code=502,
            details={"url": exc.url},
        )


@router.get("/coins")
def get_coins(limit: int = 0, rank: Optional[int] = None, currency: Optional[str] = None):
    """
    Ticker listing.
    Example: /coins?limit=10&rank=30&currency=EUR
    """
    return _call(coinmarketcap.coins, limit=limit, rank=rank, currency=currency)


@router.get("/coins/by-symbol/{symbol}")
def get_coin_by_symbol(symbol: str):
    result = _call(coinmarketcap.coin_by_symbol, symbol)
    if result is None:
        return _error_response(
            code="not_found",
            message=f"No ticker with symbol '{symbol}'",
            status_code=404,
        )
    return result


@router.get("/coins/{coin_id}")
def get_coin(coin_id: str, currency: Optional[str] = None, symbol: Optional[str] = None):
    """
    Single ticker. Pass ``symbol`` to resolve the coin by ticker symbol instead of the path id.
    Example: /coins/bitcoin?currency=EUR
    """
    return _call(coinmarketcap.coin, coin_id, currency=currency, symbol=symbol)


@router.get("/coins/{coin_id}/historical")
def get_historical_price(coin_id: str, start: str, end: str, symbol: Optional[str] = None):
    """
    Daily OHLC rows. Pass ``symbol`` to resolve the coin by ticker symbol instead of the path id.
    Example: /coins/bitcoin/historical?start=2018-01-02&end=2018-01-08
    """
    return _call(coinmarketcap.historical_price, coin_id, start, end, symbol=symbol)


@router.get("/markets")
def get_markets(id: Optional[str] = None, symbol: Optional[str] = None):
    """
    Exchange/pair table for one coin, by id or by symbol.
    Example: /markets?symbol=LTC
    """
    return _call(coinmarketcap.coin_markets, id=id, symbol=symbol)


@router.get("/global")
def get_global(currency: Optional[str] = None):
    return _call(coinmarketcap.global_stats, currency=currency)


@router.get("/listings/{listing_type}")
def get_listings(listing_type: str):
    return _call(coinmarketcap.all_listings, listing_type)
