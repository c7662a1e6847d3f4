# coincapper/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI

from coincapper.api.health import router as health_router
from coincapper.api.market import router as market_router
from coincapper.config.settings import VERSION, get_settings


logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s | %(message)s",
)

app = FastAPI(title="CoinCapper", version=VERSION)

# Routers
app.include_router(health_router)
app.include_router(market_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "CoinCapper: CoinMarketCap tickers, markets, history and listings"}
