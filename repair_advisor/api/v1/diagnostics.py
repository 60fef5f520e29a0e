"""Diagnostics API — analysis, model lookup and history as JSON."""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from repair_advisor.controller import BUSY_KIND, DiagnosticsController, format_analysis_text
from repair_advisor.dependencies import get_controller
from repair_advisor.errors import ErrorKind
from repair_advisor.schemas.analysis import (
    AnalysisRequest,
    DeviceLookupRequest,
    DeviceLookupResponse,
    ErrorResponse,
    HistoryEntry,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1", tags=["diagnostics"])

ERROR_STATUS = {
    ErrorKind.INVALID_INPUT.value: 422,
    ErrorKind.NOT_RECOGNIZED.value: 404,
    ErrorKind.QUOTA_EXCEEDED.value: 429,
    BUSY_KIND: 409,
}


def _error_response(kind: Optional[str], message: Optional[str]) -> JSONResponse:
    kind = kind or ErrorKind.UNKNOWN.value
    body = ErrorResponse(error=kind, message=message or "")
    return JSONResponse(status_code=ERROR_STATUS.get(kind, 502), content=body.model_dump())


@router.post(
    "/analysis",
    response_model=HistoryEntry,
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_analysis(
    body: AnalysisRequest,
    controller: DiagnosticsController = Depends(get_controller),
):
    """Analyze a device problem; the result is also added to the history."""
    outcome = await controller.submit_analysis(
        body.problem_description, body.device_type, body.device_model
    )
    if outcome.entry is None:
        return _error_response(outcome.error_kind, outcome.error)
    return outcome.entry


@router.post(
    "/device-lookup",
    response_model=DeviceLookupResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def lookup_device(
    body: DeviceLookupRequest,
    controller: DiagnosticsController = Depends(get_controller),
):
    """Identify the full device name for a model number (e.g. SM-G998B)."""
    outcome = await controller.lookup_model(body.model_number)
    if outcome.device_name is None:
        return _error_response(outcome.error_kind, outcome.error)
    return DeviceLookupResponse(device_name=outcome.device_name)


@router.get("/history", response_model=list[HistoryEntry])
async def list_history(controller: DiagnosticsController = Depends(get_controller)):
    """Past analyses, most recent first."""
    return controller.history.entries


@router.get("/history/{entry_id}", response_model=HistoryEntry)
async def get_history_entry(
    entry_id: str,
    controller: DiagnosticsController = Depends(get_controller),
):
    entry = controller.get_entry(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return entry


@router.get("/history/{entry_id}/text", response_class=PlainTextResponse)
async def get_history_entry_text(
    entry_id: str,
    controller: DiagnosticsController = Depends(get_controller),
):
    """Plain-text rendering of a past analysis, ready to copy."""
    entry = controller.get_entry(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    return format_analysis_text(entry, entry.device_type, entry.device_model)


@router.delete("/history", status_code=204)
async def clear_history(controller: DiagnosticsController = Depends(get_controller)):
    await controller.clear_history()
    logger.info("history_cleared_via_api")
    return Response(status_code=204)
