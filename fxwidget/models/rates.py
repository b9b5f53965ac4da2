from __future__ import annotations
from datetime import datetime
from typing import Dict
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderRatesResponse(BaseModel):
    """Shape of a provider body: ``{"rates": {"EUR": 0.85, ...}, ...}``.

    Only ``rates`` is required; any other keys (base, date, ...) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    rates: Dict[str, float]

    @field_validator("rates")
    @classmethod
    def upper_codes(cls, v: Dict[str, float]) -> Dict[str, float]:
        return {code.upper(): rate for code, rate in v.items()}


class RateTableOut(BaseModel):
    base_currency: str
    rates: Dict[str, float]
    fetched_at: datetime | None = None
    fresh: bool = Field(True, description="False once the entry has outlived the cache TTL")
