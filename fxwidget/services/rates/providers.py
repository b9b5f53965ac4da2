from __future__ import annotations

"""HTTP rate provider backed by the rate cache.

GET <provider base url>/<BASE> returns ``{"rates": {...}, ...}``. A fresh
cache entry short-circuits the request. Concurrent calls for the same base are
not coalesced; each one that misses the cache issues its own request.
"""
import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from fxwidget.core.errors import DecodeError, FetchError, NetworkError
from fxwidget.models.rates import ProviderRatesResponse
from fxwidget.services.http_client import (
    HttpDecodeError,
    HttpStatusError,
    HttpTransportError,
    get_json,
)
from .base import RateProvider, RateTable
from .cache_service import RateCache

logger = logging.getLogger("fxwidget.rates.provider")


class HTTPRateProvider(RateProvider):
    def __init__(self, client: httpx.AsyncClient, base_url: str, cache: RateCache):
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._cache = cache

    @property
    def cache(self) -> RateCache:
        return self._cache

    def url_for(self, base: str) -> str:
        return f"{self._base_url}/{base.upper()}"

    async def fetch_rates(self, base: str) -> RateTable:
        base = base.upper()
        cached = self._cache.get(base)
        if cached is not None:
            logger.debug("using cached rates for %s", base)
            return cached

        url = self.url_for(base)
        try:
            data = await get_json(self._client, url)
        except HttpStatusError as e:
            logger.warning("rate provider returned HTTP %s for %s", e.status_code, base)
            raise NetworkError() from e
        except HttpTransportError as e:
            logger.warning("error fetching exchange rates for %s", base, exc_info=e)
            raise FetchError() from e
        except HttpDecodeError as e:
            logger.warning("rate provider sent non-JSON body for %s", base, exc_info=e)
            raise DecodeError() from e

        try:
            parsed = ProviderRatesResponse.model_validate(data)
        except PydanticValidationError as e:
            logger.warning("rate provider body for %s lacks a rates mapping: %s", base, e)
            raise DecodeError() from e

        entry = self._cache.put(base, parsed.rates)
        logger.info("fetched %d rates for %s", len(entry.rates), base)
        return entry.rates
