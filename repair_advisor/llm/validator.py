"""Validation of raw model output into an ``AnalysisRecord``.

The model is asked for strict JSON but may still wrap it in a markdown fence,
omit optional keys or return the wrong types. ``parse_analysis`` never raises;
``validate_analysis`` turns a failed parse into ``MalformedResponse``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from repair_advisor.errors import MalformedResponse
from repair_advisor.schemas.analysis import AnalysisRecord

logger = structlog.get_logger()

# Wire keys the analysis prompt asks for.
KEY_ANALYSIS = "problem_analyza"
KEY_COST = "odhadovana_cena_kc"
KEY_PROS = "klady_opravy"
KEY_CONS = "zapory_opravy"
KEY_DEVICE_INFO = "info_o_zarizeni"

_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL)


@dataclass(frozen=True)
class ParseResult:
    """Either a validated record or the reason validation failed."""

    record: Optional[AnalysisRecord] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def strip_code_fence(text: str) -> str:
    """Remove one surrounding ```lang ... ``` block, if present."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


def _string_list(payload: dict, key: str) -> tuple[Optional[list[str]], Optional[str]]:
    value = payload.get(key)
    if value is None:
        return [], None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None, f"{key} is not a list of strings"
    return list(value), None


def _whole_cost(value: Any) -> Optional[int]:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_analysis(raw_text: str) -> ParseResult:
    """Parse raw model output. Total: returns a ``ParseResult``, never raises."""
    text = strip_code_fence(raw_text or "")

    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, ValueError) as e:
        return ParseResult(reason=f"invalid json: {e}")

    if not isinstance(payload, dict):
        return ParseResult(reason="top-level json is not an object")

    analysis = payload.get(KEY_ANALYSIS)
    if not isinstance(analysis, str) or not analysis.strip():
        return ParseResult(reason=f"{KEY_ANALYSIS} missing or not a non-empty string")

    cost = _whole_cost(payload.get(KEY_COST))
    if cost is None:
        return ParseResult(reason=f"{KEY_COST} missing or not a whole number")
    if cost < 0:
        return ParseResult(reason=f"{KEY_COST} is negative")

    pros, error = _string_list(payload, KEY_PROS)
    if error:
        return ParseResult(reason=error)
    cons, error = _string_list(payload, KEY_CONS)
    if error:
        return ParseResult(reason=error)

    device_info = payload.get(KEY_DEVICE_INFO)
    if device_info is not None and not isinstance(device_info, str):
        return ParseResult(reason=f"{KEY_DEVICE_INFO} is not a string")

    return ParseResult(
        record=AnalysisRecord(
            problem_analysis=analysis,
            estimated_cost=cost,
            pros=pros,
            cons=cons,
            device_info=device_info,
        )
    )


def validate_analysis(raw_text: str) -> AnalysisRecord:
    """Return the validated record or raise ``MalformedResponse``."""
    result = parse_analysis(raw_text)
    if result.record is None:
        logger.warning(
            "analysis_response_invalid",
            reason=result.reason,
            raw_text=(raw_text or "")[:200],
        )
        raise MalformedResponse(detail=result.reason)
    return result.record
