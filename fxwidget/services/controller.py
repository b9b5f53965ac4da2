from __future__ import annotations

"""Conversion controller: owns the widget state and reacts to UI events.

Every conversion attempt walks idle/previous -> loading -> success | error,
except validation failures and same-currency requests which never reach
loading. Overlapping attempts are tagged with a sequence number; only the
latest attempt may write the result area, so a slow response for an older
selection can never overwrite a newer one.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fxwidget.core.errors import ConversionError, ValidationError
from fxwidget.models.constants import PLACEHOLDER_FROM, PLACEHOLDER_RATE, PLACEHOLDER_TO
from fxwidget.models.widget import ConversionSummary, CurrencyOption, WidgetState, WidgetStatus
from fxwidget.services.catalog import populate_currency_options, supported_codes
from fxwidget.services.debounce import Debouncer
from fxwidget.services.money import format_amount
from fxwidget.services.rates.base import RateProvider
from fxwidget.services.rates.cache_service import RateCache
from fxwidget.services.rates.conversion import (
    ConversionResult,
    build_request,
    compute_conversion,
    convert_same_currency,
)

logger = logging.getLogger("fxwidget.controller")

LOADING_TEXT = "Converting..."
LOADING_DATE_TEXT = "Please wait"
FAILED_TEXT = "Conversion failed"
FAILED_DATE_TEXT = "See error below"
RATES_LOADING_TEXT = "Rates loading..."
INITIAL_LOAD_FAILED = "Failed to load initial exchange rates"
UNEXPECTED_ERROR = "Something went wrong while converting. Please try again."


def format_timestamp(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


class ConversionController:
    def __init__(
        self,
        provider: RateProvider,
        cache: Optional[RateCache] = None,
        state: Optional[WidgetState] = None,
        debounce_seconds: float = 0.5,
    ):
        self._provider = provider
        self._cache = cache
        self._state = state or WidgetState()
        self._seq = 0
        self._amount_debouncer = Debouncer(debounce_seconds, self._debounced_convert)
        self._scheduled: List[Debouncer] = []

    @property
    def state(self) -> WidgetState:
        return self._state

    # Conversion ----------------------------------------------
    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _is_current(self, seq: int) -> bool:
        return seq == self._seq

    async def convert(self) -> Optional[ConversionResult]:
        """Run one conversion from the current inputs and render the outcome.

        Errors are rendered, never raised. Returns the result when this
        attempt is the one that ended up on screen.
        """
        seq = self._next_seq()
        state = self._state
        try:
            req = build_request(state.amount_input, state.from_currency, state.to_currency)
        except ValidationError as e:
            self.show_error(e.message)
            return None

        if req.same_currency:
            result = convert_same_currency(req)
            self.update_display(result.original_amount, req.from_currency, req.to_currency, result.converted_amount)
            self.hide_error()
            return result

        self.show_loading()
        try:
            rates = await self._provider.fetch_rates(req.from_currency)
            result = compute_conversion(req, rates)
        except ConversionError as e:
            if self._is_current(seq):
                self.show_error(e.message)
            return None
        except Exception:
            logger.exception("unexpected failure converting %s -> %s", req.from_currency, req.to_currency)
            if self._is_current(seq):
                self.show_error(UNEXPECTED_ERROR)
            return None

        if not self._is_current(seq):
            logger.debug("discarding superseded conversion #%d (latest #%d)", seq, self._seq)
            return None
        self.update_display(result.original_amount, req.from_currency, req.to_currency, result.converted_amount)
        self.hide_error()
        return result

    async def _debounced_convert(self) -> None:
        await self.convert()

    async def load_default_rates(self) -> None:
        """Warm the cache for the default base and show a placeholder line.

        Renders nothing if a conversion started while the fetch was pending.
        """
        seq = self._seq
        try:
            await self._provider.fetch_rates(PLACEHOLDER_FROM)
        except ConversionError as e:
            logger.warning("initial rate load failed: %s", e.message)
            if self._is_current(seq):
                self.show_error(INITIAL_LOAD_FAILED)
            return
        if self._is_current(seq):
            self.update_display(1, PLACEHOLDER_FROM, PLACEHOLDER_TO, PLACEHOLDER_RATE)

    def start_default_load(self) -> None:
        """Run ``load_default_rates()`` in the background; returns immediately."""
        timer = Debouncer(0, self.load_default_rates)
        self._scheduled.append(timer)
        timer.trigger()

    def schedule_conversion(self, delay: float) -> None:
        """Run ``convert()`` once after ``delay`` seconds."""
        timer = Debouncer(delay, self._debounced_convert)
        self._scheduled.append(timer)
        timer.trigger()

    async def drain(self) -> None:
        """Wait for conversions already started by timers."""
        await self._amount_debouncer.drain()
        for timer in self._scheduled:
            await timer.drain()

    async def aclose(self) -> None:
        await self._amount_debouncer.aclose()
        for timer in self._scheduled:
            await timer.aclose()
        self._scheduled.clear()

    # Presentation --------------------------------------------
    def show_loading(self) -> None:
        self._state.status = WidgetStatus.LOADING
        self._state.result_text = LOADING_TEXT
        self._state.date_text = LOADING_DATE_TEXT

    def show_error(self, message: str) -> None:
        self._state.status = WidgetStatus.ERROR
        self._state.error_text = message
        self._state.error_visible = True
        self._state.result_text = FAILED_TEXT
        self._state.date_text = FAILED_DATE_TEXT
        self._state.last_result = None

    def hide_error(self) -> None:
        self._state.error_visible = False

    def update_display(
        self, original_amount: float, from_currency: str, to_currency: str, converted_amount: float
    ) -> None:
        self._state.status = WidgetStatus.SUCCESS
        self._state.result_text = (
            f"{format_amount(original_amount)} {from_currency} = "
            f"{format_amount(converted_amount)} {to_currency}"
        )
        fetched_at = self._cache.fetched_at(from_currency) if self._cache else None
        self._state.date_text = (
            f"Last updated: {format_timestamp(fetched_at)}" if fetched_at else RATES_LOADING_TEXT
        )
        self._state.last_result = ConversionSummary(
            amount=original_amount,
            from_currency=from_currency,
            to_currency=to_currency,
            converted_amount=converted_amount,
        )

    # Options -------------------------------------------------
    def populate_options(self) -> None:
        self._state.from_options = populate_currency_options(self._state.from_options)
        self._state.to_options = populate_currency_options(self._state.to_options)

    def normalize_code(self, code: str, options: List[CurrencyOption]) -> str:
        code = code.strip().upper()
        if options and code not in supported_codes(options):
            raise ValueError(f"Unsupported currency '{code}'")
        return code

    # UI events -----------------------------------------------
    async def on_convert_clicked(self) -> Optional[ConversionResult]:
        return await self.convert()

    async def on_amount_key(self, key: str) -> Optional[ConversionResult]:
        if key != "Enter":
            return None
        return await self.convert()

    async def swap_currencies(self) -> Optional[ConversionResult]:
        state = self._state
        state.from_currency, state.to_currency = state.to_currency, state.from_currency
        return await self.convert()

    async def on_from_changed(self, code: str) -> Optional[ConversionResult]:
        self._state.from_currency = self.normalize_code(code, self._state.from_options)
        return await self.convert()

    async def on_to_changed(self, code: str) -> Optional[ConversionResult]:
        self._state.to_currency = self.normalize_code(code, self._state.to_options)
        return await self.convert()

    async def on_selection_changed(
        self, from_code: Optional[str] = None, to_code: Optional[str] = None
    ) -> Optional[ConversionResult]:
        """Apply one or both selections, then convert once.

        Every code is checked before anything is written, so a rejected
        selection leaves the widget untouched.
        """
        state = self._state
        new_from = self.normalize_code(from_code, state.from_options) if from_code is not None else None
        new_to = self.normalize_code(to_code, state.to_options) if to_code is not None else None
        if new_from is None and new_to is None:
            return None
        if new_from is not None:
            state.from_currency = new_from
        if new_to is not None:
            state.to_currency = new_to
        return await self.convert()

    def on_amount_input(self, value: str) -> None:
        """Record the typed value; convert once typing pauses.

        Must be called from inside the running event loop.
        """
        self._state.amount_input = value
        self._amount_debouncer.trigger()
