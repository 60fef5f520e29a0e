"""Diagnostics controller — wires form input to the LLM and the history.

Every failure is turned into a user-facing message here; callers (HTML views,
JSON API) never see raw transport errors.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import structlog

from repair_advisor.errors import DiagnosticsError
from repair_advisor.history.store import HistoryStore
from repair_advisor.llm.analysis import AnalysisRequester
from repair_advisor.llm.device_lookup import DeviceIdentifier
from repair_advisor.schemas.analysis import (
    DEVICE_TYPE_LABELS,
    AnalysisRecord,
    DeviceType,
    HistoryEntry,
)

logger = structlog.get_logger()

BUSY_KIND = "busy"
ANALYSIS_BUSY_MESSAGE = "Analýza již probíhá. Vyčkejte prosím na její dokončení."
LOOKUP_BUSY_MESSAGE = "Zjišťování modelu již probíhá. Vyčkejte prosím."


@dataclass
class AnalysisOutcome:
    entry: Optional[HistoryEntry] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


@dataclass
class LookupOutcome:
    device_name: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None


class DiagnosticsController:
    """One analysis and one model lookup may be in flight at a time.

    The two kinds are independent; a second request of the same kind while
    one is outstanding is refused, never queued or cancelled.
    """

    def __init__(
        self,
        requester: AnalysisRequester,
        identifier: DeviceIdentifier,
        history: HistoryStore,
    ):
        self.requester = requester
        self.identifier = identifier
        self.history = history
        self._analysis_lock = asyncio.Lock()
        self._lookup_lock = asyncio.Lock()

    @property
    def analysis_in_progress(self) -> bool:
        return self._analysis_lock.locked()

    @property
    def lookup_in_progress(self) -> bool:
        return self._lookup_lock.locked()

    async def submit_analysis(
        self,
        problem_description: str,
        device_type: DeviceType | str,
        device_model: str = "",
    ) -> AnalysisOutcome:
        """Analyze the problem and store the result in history."""
        if self._analysis_lock.locked():
            return AnalysisOutcome(error=ANALYSIS_BUSY_MESSAGE, error_kind=BUSY_KIND)

        async with self._analysis_lock:
            try:
                record = await self.requester.request(
                    problem_description, device_type, device_model
                )
            except DiagnosticsError as e:
                logger.warning("analysis_failed", kind=e.kind.value, detail=e.detail)
                return AnalysisOutcome(error=e.message, error_kind=e.kind.value)

            entry = await self.history.insert(
                record,
                device_type=device_type,
                device_model=device_model,
                problem_description=problem_description,
            )
            return AnalysisOutcome(entry=entry)

    async def lookup_model(self, model_number: str) -> LookupOutcome:
        """Identify a device name to fill into the model field."""
        if self._lookup_lock.locked():
            return LookupOutcome(error=LOOKUP_BUSY_MESSAGE, error_kind=BUSY_KIND)

        async with self._lookup_lock:
            try:
                name = await self.identifier.identify(model_number)
            except DiagnosticsError as e:
                logger.warning("device_lookup_failed", kind=e.kind.value, detail=e.detail)
                return LookupOutcome(error=e.message, error_kind=e.kind.value)
            return LookupOutcome(device_name=name)

    def get_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        return self.history.get(entry_id)

    async def clear_history(self) -> None:
        await self.history.clear()


def format_analysis_text(
    record: AnalysisRecord,
    device_type: DeviceType | str,
    device_model: str = "",
) -> str:
    """Plain-text rendering of an analysis, for copying to the clipboard."""
    device_label = DEVICE_TYPE_LABELS[DeviceType(device_type)]
    full_name = f"{device_label}: {device_model}" if device_model else device_label
    separator = "-" * 36

    lines = [f"Výsledek Analýzy pro: {full_name}", separator]
    if record.device_info:
        lines += [f"Info o zařízení: {record.device_info}", ""]
    lines += [
        f"Analýza problému: {record.problem_analysis}",
        "",
        f"Odhadovaná cena opravy: {format_price(record.estimated_cost)} Kč",
        "",
    ]
    if record.pros:
        lines.append("Klady opravy:")
        lines += [f"- {item}" for item in record.pros]
        lines.append("")
    if record.cons:
        lines.append("Zápory/Rizika opravy:")
        lines += [f"- {item}" for item in record.cons]
        lines.append("")
    lines += [separator, "Generováno pomocí Repair Advisor."]
    return "\n".join(lines)


def format_price(amount: int) -> str:
    """Czech thousands grouping: 12500 -> "12 500"."""
    return f"{amount:,}".replace(",", " ")

