"""Blocking transport used for every CoinMarketCap request."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from coincapper.config.settings import get_settings

logger = logging.getLogger("coincapper.http")


class UpstreamError(RuntimeError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"Unable to reach CoinMarketCap ({reason})")
        self.url = url
        self.reason = reason


@dataclass(frozen=True)
class FetchResult:
    status: int
    body: str


def fetch(url: str) -> FetchResult:
    """
    GET ``url`` and return its status and decoded body.

    The status code is reported, not acted on: error pages and JSON error
    payloads are handed to the caller like any other body.
    """
    settings = get_settings()
    try:
        with httpx.Client(
            timeout=settings.HTTP_TIMEOUT,
            headers={"User-Agent": settings.USER_AGENT},
            follow_redirects=True,
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as exc:
        logger.warning("fetch failed | %s | %s", url, exc)
        raise UpstreamError(url, type(exc).__name__) from exc

    logger.debug("fetched | %s | status=%s | %d bytes", url, response.status_code, len(response.content))
    return FetchResult(status=response.status_code, body=response.text)
