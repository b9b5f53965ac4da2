from fxwidget.models.constants import CURRENCY_CATALOG
from fxwidget.models.widget import CurrencyOption
from fxwidget.services.catalog import builtin_options, populate_currency_options


def test_builtin_options_use_code_and_name_labels():
    options = builtin_options()
    assert len(options) == 7
    assert options[0] == CurrencyOption(value="USD", label="USD - US Dollar")


def test_populate_appends_missing_catalog_codes_in_order():
    merged = populate_currency_options(builtin_options())
    assert [o.value for o in merged] == [c.code for c in CURRENCY_CATALOG]
    assert merged[-1].label == "NZD - New Zealand Dollar"


def test_populate_is_idempotent():
    once = populate_currency_options(builtin_options())
    twice = populate_currency_options(once)
    assert twice == once


def test_populate_skips_codes_already_present():
    existing = [CurrencyOption(value="SGD", label="Singapore")]
    merged = populate_currency_options(existing)
    values = [o.value for o in merged]
    assert values.count("SGD") == 1
    assert merged[0].label == "Singapore"


def test_populate_trims_extra_options_beyond_builtin_prefix():
    extra = builtin_options() + [CurrencyOption(value="XAU", label="Gold")]
    merged = populate_currency_options(extra)
    assert "XAU" not in [o.value for o in merged]
