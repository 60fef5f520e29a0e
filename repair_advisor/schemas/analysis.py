"""Analysis and history schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DeviceType(str, Enum):
    PHONE = "phone"
    TABLET = "tablet"


DEVICE_TYPE_LABELS = {
    DeviceType.PHONE: "Telefon",
    DeviceType.TABLET: "Tablet",
}


class AnalysisRecord(BaseModel):
    """Validated AI repair analysis."""

    problem_analysis: str = Field(min_length=1)
    estimated_cost: int = Field(ge=0)  # whole Kč
    pros: list[str] = []
    cons: list[str] = []
    device_info: Optional[str] = None


class HistoryEntry(AnalysisRecord):
    """Analysis stored in the history, with the form input that produced it."""

    id: str
    created_at: int  # epoch milliseconds
    device_type: DeviceType
    device_model: str = ""
    problem_description: str

    def to_record(self) -> AnalysisRecord:
        return AnalysisRecord.model_validate(
            self.model_dump(include=set(AnalysisRecord.model_fields))
        )


class AnalysisRequest(BaseModel):
    """JSON body for the analysis endpoint."""

    problem_description: str
    device_type: DeviceType = DeviceType.PHONE
    device_model: str = ""


class DeviceLookupRequest(BaseModel):
    model_number: str


class DeviceLookupResponse(BaseModel):
    device_name: str


class ErrorResponse(BaseModel):
    error: str
    message: str
