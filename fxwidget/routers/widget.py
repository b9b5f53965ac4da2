from typing import List

from fastapi import APIRouter, Depends, HTTPException

from fxwidget.models.constants import CURRENCY_CATALOG
from fxwidget.models.widget import AmountInput, KeyPress, SelectionChange, WidgetState
from fxwidget.routers.deps import get_controller
from fxwidget.services.controller import ConversionController

"""JSON API mirroring the widget's UI events.

Each endpoint fires the same controller operation the page would and returns
the resulting widget state. Amount edits are debounced: the response reflects
the state before the delayed conversion runs.
"""

router = APIRouter(prefix="/api", tags=["widget"])


@router.get("/currencies", summary="Static currency catalog")
async def list_currencies() -> List[dict]:
    return [{"code": c.code, "name": c.display_name} for c in CURRENCY_CATALOG]


@router.get("/widget", response_model=WidgetState, summary="Current widget state")
async def widget_state(ctrl: ConversionController = Depends(get_controller)):
    return ctrl.state


@router.post("/widget/convert", response_model=WidgetState, summary="Convert button")
async def convert(ctrl: ConversionController = Depends(get_controller)):
    await ctrl.on_convert_clicked()
    return ctrl.state


@router.post("/widget/key", response_model=WidgetState, summary="Key pressed in the amount field")
async def key_pressed(payload: KeyPress, ctrl: ConversionController = Depends(get_controller)):
    await ctrl.on_amount_key(payload.key)
    return ctrl.state


@router.post("/widget/swap", response_model=WidgetState, summary="Swap source and target")
async def swap(ctrl: ConversionController = Depends(get_controller)):
    await ctrl.swap_currencies()
    return ctrl.state


@router.put("/widget/selection", response_model=WidgetState, summary="Change currency selection")
async def change_selection(
    payload: SelectionChange, ctrl: ConversionController = Depends(get_controller)
):
    try:
        await ctrl.on_selection_changed(payload.from_currency, payload.to_currency)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return ctrl.state


@router.put("/widget/amount", response_model=WidgetState, summary="Amount typed (debounced)")
async def amount_input(payload: AmountInput, ctrl: ConversionController = Depends(get_controller)):
    ctrl.on_amount_input(payload.value)
    return ctrl.state
