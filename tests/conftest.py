import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from fxwidget.core.config import Settings
from fxwidget.services.http_client import build_client
from fxwidget.services.rates.base import RateProvider
from fxwidget.services.rates.cache_service import RateCache
from fxwidget.services.rates.providers import HTTPRateProvider

PROVIDER_URL = "https://rates.test/v4/latest"

USD_RATES = {"USD": 1.0, "EUR": 0.85, "GBP": 0.75, "JPY": 150.0}
EUR_RATES = {"EUR": 1.0, "USD": 1 / 0.85, "GBP": 0.88}
GBP_RATES = {"GBP": 1.0, "USD": 1 / 0.75, "EUR": 1 / 0.88}


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class FakeProvider(RateProvider):
    """Canned tables, a call log and optional per-base gates."""

    def __init__(self, tables: Dict[str, Dict[str, float]], cache: Optional[RateCache] = None):
        self.tables = tables
        self.cache = cache
        self.calls: List[str] = []
        self.gates: Dict[str, asyncio.Event] = {}
        self.errors: Dict[str, Exception] = {}

    async def fetch_rates(self, base: str):
        if self.cache is not None and self.cache.get(base) is not None:
            return self.cache.get(base)
        self.calls.append(base)
        gate = self.gates.get(base)
        if gate is not None:
            await gate.wait()
        if base in self.errors:
            raise self.errors[base]
        table = self.tables[base]
        if self.cache is not None:
            return self.cache.put(base, table).rates
        return table


class RecordingHandler:
    """httpx MockTransport handler serving JSON per base currency."""

    def __init__(self, tables: Dict[str, Dict[str, float]]):
        self.tables = tables
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        base = request.url.path.rsplit("/", 1)[-1]
        if base not in self.tables:
            return httpx.Response(404, json={"error": "unknown base"})
        return httpx.Response(200, json={"base": base, "date": "2026-10-18", "rates": self.tables[base]})


def make_http_provider(
    handler: Callable[[httpx.Request], httpx.Response], cache: RateCache
) -> HTTPRateProvider:
    client = build_client(timeout=5.0, transport=httpx.MockTransport(handler))
    return HTTPRateProvider(client, PROVIDER_URL, cache)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> RateCache:
    return RateCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler({"USD": USD_RATES, "EUR": EUR_RATES, "GBP": GBP_RATES})


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        exchange_api_base_url=PROVIDER_URL,
        bootstrap_on_startup=False,
        debounce_seconds=0.01,
        initial_convert_delay_seconds=0.01,
    )
