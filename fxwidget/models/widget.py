from __future__ import annotations
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class WidgetStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class CurrencyOption(BaseModel):
    value: str
    label: str


class ConversionSummary(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    converted_amount: float


class WidgetState(BaseModel):
    """Presentation state of the converter; the page renders exactly this."""

    amount_input: str = "1"
    from_currency: str = "USD"
    to_currency: str = "EUR"
    from_options: List[CurrencyOption] = Field(default_factory=list)
    to_options: List[CurrencyOption] = Field(default_factory=list)

    status: WidgetStatus = WidgetStatus.IDLE
    result_text: str = ""
    date_text: str = ""
    error_text: str = ""
    error_visible: bool = False
    last_result: Optional[ConversionSummary] = None


class AmountInput(BaseModel):
    value: str


class KeyPress(BaseModel):
    key: str


class SelectionChange(BaseModel):
    from_currency: Optional[str] = Field(None, alias="from")
    to_currency: Optional[str] = Field(None, alias="to")
