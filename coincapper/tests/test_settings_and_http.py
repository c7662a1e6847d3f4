from __future__ import annotations

import dataclasses

import httpx
import pytest
from fastapi.testclient import TestClient

from coincapper.config.settings import Settings, get_settings, reset_settings
from coincapper.services import http as http_module
from coincapper.services.http import UpstreamError, fetch


def test_settings_defaults():
    settings = get_settings()
    assert settings.API_URL == "https://api.coinmarketcap.com/v1"
    assert settings.BASE_URL == "https://coinmarketcap.com"
    assert settings.HTTP_TIMEOUT == 10.0
    assert settings.USER_AGENT.startswith("coincapper/")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("COINCAPPER_API_URL", "http://localhost:9000/v1/")
    monkeypatch.setenv("COINCAPPER_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("COINCAPPER_BASE_URL", "  ")
    reset_settings()
    settings = get_settings()
    assert settings.API_URL == "http://localhost:9000/v1"
    assert settings.HTTP_TIMEOUT == 2.5
    assert settings.BASE_URL == "https://coinmarketcap.com"
    assert get_settings() is settings


def test_settings_are_frozen():
    settings = Settings.from_env()
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.API_URL = "x"


def _patch_client(monkeypatch, handler):
    real_client = httpx.Client

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(http_module.httpx, "Client", client_factory)


def test_fetch_returns_status_and_body_without_raising(monkeypatch):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["ua"] = request.headers["User-Agent"]
        return httpx.Response(404, text='{"error": "id not found"}')

    _patch_client(monkeypatch, handler)
    result = fetch("https://api.coinmarketcap.com/v1/ticker/bitco/")
    assert result.status == 404
    assert result.body == '{"error": "id not found"}'
    assert seen["url"] == "https://api.coinmarketcap.com/v1/ticker/bitco/"
    assert seen["ua"].startswith("coincapper/")


def test_fetch_wraps_transport_errors(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    _patch_client(monkeypatch, handler)
    with pytest.raises(UpstreamError) as excinfo:
        fetch("https://coinmarketcap.com/coins/views/all/")
    assert excinfo.value.reason == "ConnectError"
    assert excinfo.value.url == "https://coinmarketcap.com/coins/views/all/"


def test_app_health_and_root():
    from coincapper.main import app

    client = TestClient(app)
    assert client.get("/").status_code == 200
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["upstream"]["base_url"] == "https://coinmarketcap.com"
