from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from fxwidget.routers.deps import get_controller
from fxwidget.services.controller import ConversionController

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _render(request: Request, ctrl: ConversionController, status_code: int = 200):
    settings = request.app.state.settings
    context = {
        "app_name": settings.app_name,
        "version": settings.version,
        "state": ctrl.state,
    }
    return templates.TemplateResponse(request, "converter.html", context, status_code=status_code)


@router.get("/", response_class=HTMLResponse)
async def ui_home(request: Request, ctrl: ConversionController = Depends(get_controller)):
    return _render(request, ctrl)


@router.post("/", response_class=HTMLResponse)
async def ui_submit(
    request: Request,
    amount: str = Form(""),
    from_currency: str = Form(..., alias="from"),
    to_currency: str = Form(..., alias="to"),
    action: Optional[str] = Form("convert"),
    ctrl: ConversionController = Depends(get_controller),
):
    """Form post from the page; mirrors the convert and swap buttons."""
    state = ctrl.state
    try:
        new_from = ctrl.normalize_code(from_currency, state.from_options)
        new_to = ctrl.normalize_code(to_currency, state.to_options)
    except ValueError as exc:
        ctrl.show_error(str(exc))
        return _render(request, ctrl, status_code=400)
    state.amount_input = amount
    state.from_currency, state.to_currency = new_from, new_to

    if action == "swap":
        await ctrl.swap_currencies()
    else:
        await ctrl.on_convert_clicked()
    return _render(request, ctrl)
