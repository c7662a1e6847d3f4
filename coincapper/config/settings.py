# coincapper/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass

VERSION = "1.2.0"


def parse_float(value: str | None, default: float) -> float:
    if value is None or value.strip() == "":
        return default
    return float(value)


def parse_str(value: str | None, default: str) -> str:
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass(frozen=True)
class Settings:
    API_URL: str
    BASE_URL: str
    HTTP_TIMEOUT: float
    USER_AGENT: str
    LOG_LEVEL: str

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            API_URL=parse_str(os.getenv("COINCAPPER_API_URL"), "https://api.coinmarketcap.com/v1").rstrip("/"),
            BASE_URL=parse_str(os.getenv("COINCAPPER_BASE_URL"), "https://coinmarketcap.com").rstrip("/"),
            HTTP_TIMEOUT=parse_float(os.getenv("COINCAPPER_HTTP_TIMEOUT"), 10.0),
            USER_AGENT=parse_str(os.getenv("COINCAPPER_USER_AGENT"), f"coincapper/{VERSION}"),
            LOG_LEVEL=parse_str(os.getenv("LOG_LEVEL"), "INFO").upper(),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the memoized settings so the next call re-reads the environment."""
    global _settings
    _settings = None
