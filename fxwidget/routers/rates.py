from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from fxwidget.models.rates import RateTableOut
from fxwidget.routers.deps import get_rate_provider
from fxwidget.services.rates.providers import HTTPRateProvider

"""Rates router exposing the cached rate table for one base currency.

GET /rates/{base} goes through the same cache as the widget, so a call here
warms the cache for a later conversion (and vice versa). Provider failures are
turned into JSON errors by the ConversionError handler.
"""

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("/{base}", response_model=RateTableOut, summary="Rate table for a base currency")
async def get_rates(
    base: str = Path(..., min_length=3, max_length=3, description="ISO 4217 code, e.g. USD"),
    provider: HTTPRateProvider = Depends(get_rate_provider),
) -> RateTableOut:
    base = base.upper()
    rates = await provider.fetch_rates(base)
    cache = provider.cache
    return RateTableOut(
        base_currency=base,
        rates=dict(rates),
        fetched_at=cache.fetched_at(base),
        fresh=cache.is_fresh(base),
    )
