"""Money / display formatting helpers.

Centralized so the result line and the JSON API format amounts identically.
Formatting is display only; callers never feed the formatted value back into
arithmetic.
"""

from __future__ import annotations
from decimal import Context, Decimal, ROUND_HALF_UP

MIN_FRACTION_DIGITS = 2
MAX_FRACTION_DIGITS = 6

# enough digits for any finite float at six decimals
_WIDE = Context(prec=400)


def format_amount(
    value: float,
    min_digits: int = MIN_FRACTION_DIGITS,
    max_digits: int = MAX_FRACTION_DIGITS,
) -> str:
    """en-US style: thousands grouping, between min and max fraction digits.

    >>> format_amount(85.0)
    '85.00'
    >>> format_amount(1234.5678912)
    '1,234.567891'
    """
    quantized = Decimal(repr(float(value))).quantize(
        Decimal(1).scaleb(-max_digits), rounding=ROUND_HALF_UP, context=_WIDE
    )
    if quantized == 0:
        quantized = abs(quantized)  # no "-0.00"
    text = f"{quantized:,.{max_digits}f}"
    whole, _, frac = text.partition(".")
    frac = frac.rstrip("0")
    if len(frac) < min_digits:
        frac = frac.ljust(min_digits, "0")
    return f"{whole}.{frac}" if frac else whole
