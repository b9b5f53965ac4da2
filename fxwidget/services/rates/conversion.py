from __future__ import annotations

import math
import re
from dataclasses import dataclass

from fxwidget.core.errors import RateUnavailable, ValidationError
from .base import RateTable

"""Pure conversion step: validate the amount, look up the factor, multiply.

No rounding happens here; values are rounded only when formatted for display.
"""

# Plain ASCII decimal, optional exponent. No "_" separators, no "inf"/"nan".
_AMOUNT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ConversionRequest:
    amount: float
    from_currency: str
    to_currency: str

    @property
    def same_currency(self) -> bool:
        return self.from_currency == self.to_currency


@dataclass(frozen=True)
class ConversionResult:
    original_amount: float
    from_currency: str
    to_currency: str
    rate: float
    converted_amount: float


def parse_amount(raw: str | float | None) -> float:
    """Amount from user input; must be a finite number greater than zero."""
    if raw is None:
        raise ValidationError()
    text = str(raw).strip()
    if not _AMOUNT_RE.fullmatch(text):
        raise ValidationError()
    value = float(text)
    if not math.isfinite(value) or value <= 0:
        raise ValidationError()
    return value


def build_request(raw_amount: str | float | None, from_currency: str, to_currency: str) -> ConversionRequest:
    return ConversionRequest(
        amount=parse_amount(raw_amount),
        from_currency=from_currency.upper(),
        to_currency=to_currency.upper(),
    )


def lookup_rate(rates: RateTable, to_currency: str) -> float:
    rate = rates.get(to_currency.upper())
    if rate is None or not math.isfinite(rate) or rate <= 0:
        raise RateUnavailable()
    return rate


def convert_same_currency(req: ConversionRequest) -> ConversionResult:
    return ConversionResult(
        original_amount=req.amount,
        from_currency=req.from_currency,
        to_currency=req.to_currency,
        rate=1.0,
        converted_amount=req.amount,
    )


def compute_conversion(req: ConversionRequest, rates: RateTable) -> ConversionResult:
    rate = lookup_rate(rates, req.to_currency)
    converted = req.amount * rate
    if not math.isfinite(converted):
        raise ValidationError()
    return ConversionResult(
        original_amount=req.amount,
        from_currency=req.from_currency,
        to_currency=req.to_currency,
        rate=rate,
        converted_amount=converted,
    )
