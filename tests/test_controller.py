import asyncio

import pytest

from tests.conftest import GBP_RATES, USD_RATES, FakeProvider
from fxwidget.core.errors import FetchError, NetworkError
from fxwidget.models.widget import WidgetState, WidgetStatus
from fxwidget.services.catalog import builtin_options
from fxwidget.services.controller import ConversionController


def make_controller(cache=None, tables=None, **state):
    provider = FakeProvider(tables or {"USD": USD_RATES, "GBP": GBP_RATES}, cache=cache)
    ctrl = ConversionController(provider, cache=cache, state=WidgetState(**state), debounce_seconds=0.01)
    return ctrl, provider


def test_converts_and_renders_result(cache):
    ctrl, provider = make_controller(cache, amount_input="100", from_currency="USD", to_currency="EUR")

    result = asyncio.run(ctrl.convert())

    assert result.converted_amount == pytest.approx(85.0)
    assert provider.calls == ["USD"]
    state = ctrl.state
    assert state.status is WidgetStatus.SUCCESS
    assert state.result_text == "100.00 USD = 85.00 EUR"
    assert state.date_text == "Last updated: 2026-10-18 12:00:00 UTC"
    assert state.error_visible is False
    assert state.last_result.converted_amount == pytest.approx(85.0)


@pytest.mark.parametrize("raw", ["-5", "0", "", "abc"])
def test_invalid_amount_never_fetches(cache, raw):
    ctrl, provider = make_controller(cache, amount_input=raw, from_currency="USD", to_currency="EUR")

    assert asyncio.run(ctrl.convert()) is None

    assert provider.calls == []
    state = ctrl.state
    assert state.status is WidgetStatus.ERROR
    assert state.error_text == "Please enter a valid amount greater than 0"
    assert state.error_visible is True
    assert state.result_text == "Conversion failed"
    assert state.date_text == "See error below"


def test_same_currency_short_circuits_network(cache):
    ctrl, provider = make_controller(cache, amount_input="50", from_currency="GBP", to_currency="GBP")

    result = asyncio.run(ctrl.convert())

    assert provider.calls == []
    assert result.converted_amount == 50.0
    assert ctrl.state.result_text == "50.00 GBP = 50.00 GBP"
    assert ctrl.state.date_text == "Rates loading..."


def test_missing_target_shows_rate_unavailable(cache):
    ctrl, provider = make_controller(cache, amount_input="10", from_currency="USD", to_currency="NZD")
    ctrl.state.last_result = None

    asyncio.run(ctrl.convert())

    assert provider.calls == ["USD"]
    assert ctrl.state.status is WidgetStatus.ERROR
    assert ctrl.state.error_text == "Exchange rate not available for selected currencies"
    assert ctrl.state.result_text == "Conversion failed"
    assert ctrl.state.last_result is None


def test_provider_errors_are_rendered_not_raised(cache):
    ctrl, provider = make_controller(cache, amount_input="10", from_currency="USD", to_currency="EUR")
    provider.errors["USD"] = FetchError()

    asyncio.run(ctrl.convert())

    assert ctrl.state.error_text == (
        "Failed to fetch exchange rates. Please check your internet connection."
    )
    assert ctrl.state.result_text == "Conversion failed"


def test_unexpected_errors_still_leave_terminal_state(cache):
    ctrl, provider = make_controller(cache, amount_input="10", from_currency="USD", to_currency="EUR")
    provider.errors["USD"] = RuntimeError("boom")

    asyncio.run(ctrl.convert())

    assert ctrl.state.status is WidgetStatus.ERROR
    assert ctrl.state.result_text != "Converting..."


def test_new_error_replaces_previous_and_success_hides_it(cache):
    ctrl, provider = make_controller(cache, amount_input="-1", from_currency="USD", to_currency="EUR")

    async def run():
        await ctrl.convert()
        provider.errors["USD"] = NetworkError()
        ctrl.state.amount_input = "5"
        await ctrl.convert()
        assert ctrl.state.error_text == "Network response was not ok"
        del provider.errors["USD"]
        await ctrl.convert()

    asyncio.run(run())
    assert ctrl.state.error_visible is False
    assert ctrl.state.result_text == "5.00 USD = 4.25 EUR"


def test_loading_state_while_fetch_is_pending(cache):
    ctrl, provider = make_controller(cache, amount_input="1", from_currency="USD", to_currency="EUR")

    async def run():
        provider.gates["USD"] = asyncio.Event()
        task = asyncio.create_task(ctrl.convert())
        await asyncio.sleep(0)
        assert ctrl.state.status is WidgetStatus.LOADING
        assert ctrl.state.result_text == "Converting..."
        assert ctrl.state.date_text == "Please wait"
        provider.gates["USD"].set()
        await task

    asyncio.run(run())
    assert ctrl.state.status is WidgetStatus.SUCCESS


def test_only_latest_conversion_is_rendered(cache):
    ctrl, provider = make_controller(cache, amount_input="10", from_currency="USD", to_currency="EUR")

    async def run():
        provider.gates["USD"] = asyncio.Event()
        slow = asyncio.create_task(ctrl.convert())
        await asyncio.sleep(0)
        ctrl.state.from_currency = "GBP"
        fast = await ctrl.convert()
        provider.gates["USD"].set()
        stale = await slow
        return fast, stale

    fast, stale = asyncio.run(run())
    assert stale is None
    assert fast.from_currency == "GBP"
    assert ctrl.state.result_text.startswith("10.00 GBP = ")


def test_validation_error_supersedes_in_flight_request(cache):
    ctrl, provider = make_controller(cache, amount_input="10", from_currency="USD", to_currency="EUR")

    async def run():
        provider.gates["USD"] = asyncio.Event()
        slow = asyncio.create_task(ctrl.convert())
        await asyncio.sleep(0)
        ctrl.state.amount_input = "-3"
        await ctrl.convert()
        provider.gates["USD"].set()
        await slow

    asyncio.run(run())
    assert ctrl.state.status is WidgetStatus.ERROR
    assert ctrl.state.error_text == "Please enter a valid amount greater than 0"


def test_staleness_line_is_per_base(cache, clock):
    ctrl, provider = make_controller(cache, amount_input="1", from_currency="USD", to_currency="EUR")

    async def run():
        await ctrl.convert()
        clock.advance(90)
        ctrl.state.from_currency = "GBP"
        await ctrl.convert()
        assert ctrl.state.date_text == "Last updated: 2026-10-18 12:01:30 UTC"
        ctrl.state.from_currency = "USD"
        await ctrl.convert()

    asyncio.run(run())
    # USD served from cache: timestamp is the USD fetch, not the later GBP one
    assert provider.calls == ["USD", "GBP"]
    assert ctrl.state.date_text == "Last updated: 2026-10-18 12:00:00 UTC"


def test_enter_key_converts_other_keys_do_not(cache):
    ctrl, provider = make_controller(cache, amount_input="2", from_currency="USD", to_currency="EUR")

    async def run():
        assert await ctrl.on_amount_key("a") is None
        assert provider.calls == []
        return await ctrl.on_amount_key("Enter")

    result = asyncio.run(run())
    assert result.converted_amount == pytest.approx(1.7)


def test_swap_exchanges_selection_and_converts(cache):
    ctrl, provider = make_controller(cache, amount_input="3", from_currency="USD", to_currency="GBP")

    asyncio.run(ctrl.swap_currencies())

    assert (ctrl.state.from_currency, ctrl.state.to_currency) == ("GBP", "USD")
    assert provider.calls == ["GBP"]
    assert ctrl.state.result_text == "3.00 GBP = 4.00 USD"


def test_selection_change_triggers_conversion(cache):
    ctrl, provider = make_controller(
        cache,
        amount_input="1",
        from_currency="USD",
        to_currency="EUR",
        from_options=builtin_options(),
        to_options=builtin_options(),
    )
    ctrl.populate_options()

    async def run():
        await ctrl.on_to_changed("gbp")
        await ctrl.on_from_changed("GBP")

    asyncio.run(run())
    assert ctrl.state.to_currency == "GBP"
    assert ctrl.state.result_text == "1.00 GBP = 1.00 GBP"
    assert provider.calls == ["USD"]

    with pytest.raises(ValueError):
        asyncio.run(ctrl.on_from_changed("XXX"))


def test_load_default_rates_shows_placeholder(cache):
    ctrl, provider = make_controller(cache)

    asyncio.run(ctrl.load_default_rates())

    assert provider.calls == ["USD"]
    assert ctrl.state.result_text == "1.00 USD = 0.85 EUR"
    assert ctrl.state.date_text.startswith("Last updated: ")


def test_load_default_rates_failure_shows_error(cache):
    ctrl, provider = make_controller(cache)
    provider.errors["USD"] = FetchError()

    asyncio.run(ctrl.load_default_rates())

    assert ctrl.state.error_text == "Failed to load initial exchange rates"
    assert ctrl.state.error_visible is True


def test_scheduled_conversion_runs_once(cache):
    ctrl, provider = make_controller(cache, amount_input="4", from_currency="USD", to_currency="EUR")

    async def run():
        ctrl.schedule_conversion(0.01)
        await asyncio.sleep(0.05)
        await ctrl.drain()
        await ctrl.aclose()

    asyncio.run(run())
    assert provider.calls == ["USD"]
    assert ctrl.state.result_text == "4.00 USD = 3.40 EUR"


def test_rejected_selection_changes_nothing(cache):
    ctrl, provider = make_controller(
        cache,
        amount_input="1",
        from_currency="USD",
        to_currency="EUR",
        from_options=builtin_options(),
        to_options=builtin_options(),
    )
    ctrl.populate_options()
    before = ctrl.state.model_copy(deep=True)

    with pytest.raises(ValueError):
        asyncio.run(ctrl.on_selection_changed("GBP", "XXX"))

    assert ctrl.state == before
    assert provider.calls == []


def test_selection_change_applies_both_codes_with_one_conversion(cache):
    ctrl, provider = make_controller(cache, amount_input="2", from_currency="USD", to_currency="EUR")

    result = asyncio.run(ctrl.on_selection_changed("gbp", "usd"))

    assert (ctrl.state.from_currency, ctrl.state.to_currency) == ("GBP", "USD")
    assert provider.calls == ["GBP"]
    assert result.converted_amount == pytest.approx(2 / 0.75)


def test_default_load_runs_in_background(cache):
    ctrl, provider = make_controller(cache)

    async def run():
        provider.gates["USD"] = asyncio.Event()
        ctrl.start_default_load()
        await asyncio.sleep(0.01)
        assert provider.calls == ["USD"]
        assert ctrl.state.status is WidgetStatus.IDLE
        provider.gates["USD"].set()
        await ctrl.drain()
        await ctrl.aclose()

    asyncio.run(run())
    assert ctrl.state.result_text == "1.00 USD = 0.85 EUR"


def test_default_load_does_not_overwrite_newer_conversion(cache):
    ctrl, provider = make_controller(cache, amount_input="50", from_currency="GBP", to_currency="GBP")

    async def run():
        provider.gates["USD"] = asyncio.Event()
        ctrl.start_default_load()
        await asyncio.sleep(0.01)
        await ctrl.convert()
        provider.gates["USD"].set()
        await ctrl.drain()
        await ctrl.aclose()

    asyncio.run(run())
    assert ctrl.state.result_text == "50.00 GBP = 50.00 GBP"
