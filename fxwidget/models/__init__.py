"""Pydantic models and static data for the currency converter widget."""

from .constants import CURRENCY_CATALOG, CurrencyInfo  # re-export
from .rates import ProviderRatesResponse, RateTableOut
from .widget import (
    ConversionSummary,
    CurrencyOption,
    WidgetState,
    WidgetStatus,
)

__all__ = [
    "CURRENCY_CATALOG",
    "CurrencyInfo",
    "ProviderRatesResponse",
    "RateTableOut",
    "ConversionSummary",
    "CurrencyOption",
    "WidgetState",
    "WidgetStatus",
]
