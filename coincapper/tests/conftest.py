from __future__ import annotations

import re
from pathlib import Path

import pytest

from coincapper.config import settings as settings_module
from coincapper.services import coinmarketcap
from coincapper.services.http import FetchResult

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeUpstream:
    """Stands in for ``fetch``: answers stubbed URL patterns and records every request."""

    def __init__(self) -> None:
        self._routes: list[tuple[re.Pattern[str], FetchResult]] = []
        self.requests: list[str] = []

    def stub(self, pattern: str, body: str = "", *, fixture: str | None = None, status: int = 200) -> None:
        if fixture is not None:
            body = load_fixture(fixture)
        self._routes.append((re.compile(pattern), FetchResult(status=status, body=body)))

    def requested(self, pattern: str) -> int:
        return sum(1 for url in self.requests if re.search(pattern, url))

    def __call__(self, url: str) -> FetchResult:
        self.requests.append(url)
        for pattern, result in self._routes:
            if pattern.search(url):
                return result
        raise AssertionError(f"unexpected request: {url}")


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    for name in ("COINCAPPER_API_URL", "COINCAPPER_BASE_URL", "COINCAPPER_HTTP_TIMEOUT", "COINCAPPER_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


@pytest.fixture()
def upstream(monkeypatch) -> FakeUpstream:
    fake = FakeUpstream()
    monkeypatch.setattr(coinmarketcap, "fetch", fake)
    return fake
