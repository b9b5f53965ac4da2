"""Populate currency selection options from the static catalog."""

from __future__ import annotations
from typing import Iterable, List

from fxwidget.models.constants import (
    BUILTIN_OPTION_CODES,
    BUILTIN_OPTION_LIMIT,
    CURRENCY_CATALOG,
    CurrencyInfo,
)
from fxwidget.models.widget import CurrencyOption


def option_label(info: CurrencyInfo) -> str:
    return f"{info.code} - {info.display_name}"


def builtin_options() -> List[CurrencyOption]:
    names = {c.code: c.display_name for c in CURRENCY_CATALOG}
    return [
        CurrencyOption(value=code, label=option_label(CurrencyInfo(code, names[code])))
        for code in BUILTIN_OPTION_CODES
    ]


def populate_currency_options(
    options: List[CurrencyOption],
    catalog: Iterable[CurrencyInfo] = CURRENCY_CATALOG,
) -> List[CurrencyOption]:
    """Return options trimmed to the built-in prefix plus missing catalog codes.

    Running it again on its own output yields the same list.
    """
    merged = list(options[:BUILTIN_OPTION_LIMIT])
    present = {o.value for o in merged}
    for info in catalog:
        if info.code in present:
            continue
        merged.append(CurrencyOption(value=info.code, label=option_label(info)))
        present.add(info.code)
    return merged


def supported_codes(options: Iterable[CurrencyOption]) -> List[str]:
    return [o.value for o in options]
