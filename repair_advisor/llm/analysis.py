"""Analysis requester — sends a problem description, validates the answer."""

from __future__ import annotations

from typing import Optional

import structlog

from repair_advisor.errors import InvalidInput, classify_failure
from repair_advisor.llm.client import TextGenerator, generate_text
from repair_advisor.llm.prompts.analysis_prompt import build_analysis_prompts
from repair_advisor.llm.validator import validate_analysis
from repair_advisor.schemas.analysis import AnalysisRecord, DeviceType

logger = structlog.get_logger()

EMPTY_DESCRIPTION_MESSAGE = "Prosím, popište problém s vaším zařízením."
ANALYSIS_FAILED_MESSAGE = "Nepodařilo se získat analýzu. Zkuste to prosím později."


class AnalysisRequester:
    """Requests a repair analysis from the LLM."""

    def __init__(self, generate: Optional[TextGenerator] = None):
        self.generate = generate or generate_text

    async def request(
        self,
        problem_description: str,
        device_type: DeviceType | str = DeviceType.PHONE,
        device_model: str = "",
    ) -> AnalysisRecord:
        """Analyze a described device problem.

        Args:
            problem_description: Free-text problem from the form
            device_type: "phone" or "tablet"
            device_model: Brand and model, may be empty

        Returns:
            Validated AnalysisRecord

        Raises:
            InvalidInput: blank description, raised before any LLM call
            MalformedResponse: the model broke the JSON contract
            DiagnosticsError: transport failure mapped by ``classify_failure``
        """
        if not problem_description or not problem_description.strip():
            raise InvalidInput(EMPTY_DESCRIPTION_MESSAGE)

        try:
            device_type = DeviceType(device_type)
        except ValueError:
            raise InvalidInput(f"Neznámý typ zařízení: {device_type}") from None

        system, prompt = build_analysis_prompts(
            problem_description=problem_description,
            device_type=device_type.value,
            device_model=device_model or "",
        )

        try:
            raw_text = await self.generate(prompt, system, response_format="json")
        except Exception as e:
            error = classify_failure(e, ANALYSIS_FAILED_MESSAGE)
            logger.error(
                "llm_request_failed",
                operation="analysis",
                kind=error.kind.value,
                error=str(e),
            )
            if error is e:
                raise
            raise error from e

        record = validate_analysis(raw_text)
        logger.info(
            "analysis_completed",
            device_type=device_type.value,
            device_model=device_model or None,
            estimated_cost=record.estimated_cost,
            pros=len(record.pros),
            cons=len(record.cons),
        )
        return record

