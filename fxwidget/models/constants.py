"""Static currency catalog used to populate the selection widgets.

Order matters: options are appended in this order after the built-in ones.
"""

from typing import List, NamedTuple


class CurrencyInfo(NamedTuple):
    code: str
    display_name: str


CURRENCY_CATALOG: List[CurrencyInfo] = [
    CurrencyInfo("USD", "US Dollar"),
    CurrencyInfo("EUR", "Euro"),
    CurrencyInfo("GBP", "British Pound"),
    CurrencyInfo("JPY", "Japanese Yen"),
    CurrencyInfo("INR", "Indian Rupee"),
    CurrencyInfo("CAD", "Canadian Dollar"),
    CurrencyInfo("AUD", "Australian Dollar"),
    CurrencyInfo("CHF", "Swiss Franc"),
    CurrencyInfo("CNY", "Chinese Yuan"),
    CurrencyInfo("HKD", "Hong Kong Dollar"),
    CurrencyInfo("SGD", "Singapore Dollar"),
    CurrencyInfo("NZD", "New Zealand Dollar"),
]

# Options the page ships with before the catalog is merged in.
BUILTIN_OPTION_CODES: List[str] = ["USD", "EUR", "GBP", "JPY", "INR", "CAD", "AUD"]
BUILTIN_OPTION_LIMIT = 7

# Placeholder shown once the default USD table is loaded.
PLACEHOLDER_FROM = "USD"
PLACEHOLDER_TO = "EUR"
PLACEHOLDER_RATE = 0.85
