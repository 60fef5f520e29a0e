"""Form views — the diagnostic form, model lookup and history."""

from __future__ import annotations

import pathlib
from datetime import datetime
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from repair_advisor.controller import DiagnosticsController, format_analysis_text, format_price
from repair_advisor.dependencies import get_controller
from repair_advisor.schemas.analysis import DEVICE_TYPE_LABELS, AnalysisRecord, DeviceType

logger = structlog.get_logger()

router = APIRouter(tags=["web"])

TEMPLATES_DIR = pathlib.Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

MODEL_PLACEHOLDERS = {
    DeviceType.PHONE.value: "Např. Samsung Galaxy S21, iPhone 13 Pro...",
    DeviceType.TABLET.value: "Např. iPad Air 5, Samsung Galaxy Tab S8...",
}


def _format_timestamp(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000).strftime("%d.%m.%Y %H:%M")


templates.env.filters["price"] = format_price
templates.env.filters["timestamp"] = _format_timestamp


def _render(
    request: Request,
    controller: DiagnosticsController,
    *,
    device_type: str = DeviceType.PHONE.value,
    device_model: str = "",
    problem_description: str = "",
    result: Optional[AnalysisRecord] = None,
    error: Optional[str] = None,
    lookup_error: Optional[str] = None,
    model_number: str = "",
) -> HTMLResponse:
    copy_text = (
        format_analysis_text(result, device_type, device_model) if result is not None else None
    )
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "device_type": device_type,
            "device_model": device_model,
            "problem_description": problem_description,
            "model_placeholder": MODEL_PLACEHOLDERS.get(device_type, ""),
            "device_type_labels": {t.value: label for t, label in DEVICE_TYPE_LABELS.items()},
            "result": result,
            "copy_text": copy_text,
            "error": error,
            "lookup_error": lookup_error,
            "model_number": model_number,
            "history": controller.history.entries,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    controller: DiagnosticsController = Depends(get_controller),
):
    """Empty diagnostic form."""
    return _render(request, controller)


@router.post("/analyze", response_class=HTMLResponse)
async def analyze(
    request: Request,
    device_type: str = Form(DeviceType.PHONE.value),
    device_model: str = Form(""),
    problem_description: str = Form(""),
    controller: DiagnosticsController = Depends(get_controller),
):
    """Submit the form; show the analysis or the error, keep the inputs."""
    outcome = await controller.submit_analysis(problem_description, device_type, device_model)
    return _render(
        request,
        controller,
        device_type=device_type,
        device_model=device_model,
        problem_description=problem_description,
        result=outcome.entry,
        error=outcome.error,
    )


@router.post("/lookup", response_class=HTMLResponse)
async def lookup(
    request: Request,
    model_number: str = Form(""),
    device_type: str = Form(DeviceType.PHONE.value),
    device_model: str = Form(""),
    problem_description: str = Form(""),
    controller: DiagnosticsController = Depends(get_controller),
):
    """Look up the model by model number and fill it into the form."""
    outcome = await controller.lookup_model(model_number)
    if outcome.device_name is not None:
        device_model = outcome.device_name
        model_number = ""
    return _render(
        request,
        controller,
        device_type=device_type,
        device_model=device_model,
        problem_description=problem_description,
        lookup_error=outcome.error,
        model_number=model_number,
    )


@router.get("/history/{entry_id}", response_class=HTMLResponse)
async def history_item(
    request: Request,
    entry_id: str,
    controller: DiagnosticsController = Depends(get_controller),
):
    """Re-open a past analysis with the form filled in as it was submitted."""
    entry = controller.get_entry(entry_id)
    if entry is None:
        return RedirectResponse(url="/", status_code=303)
    return _render(
        request,
        controller,
        device_type=entry.device_type.value,
        device_model=entry.device_model,
        problem_description=entry.problem_description,
        result=entry.to_record(),
    )


@router.post("/history/clear")
async def clear_history(controller: DiagnosticsController = Depends(get_controller)):
    await controller.clear_history()
    return RedirectResponse(url="/", status_code=303)
