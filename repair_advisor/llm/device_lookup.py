"""Device identifier — full device name from a model number."""

from __future__ import annotations

from typing import Optional, Sequence

import structlog

from repair_advisor.config import settings
from repair_advisor.errors import (
    InvalidInput,
    NotRecognized,
    UnreliableResponse,
    classify_failure,
)
from repair_advisor.llm.client import TextGenerator, generate_text
from repair_advisor.llm.prompts.device_lookup_prompt import (
    DEVICE_LOOKUP_SYSTEM_PROMPT,
    DEVICE_LOOKUP_USER_PROMPT,
)

logger = structlog.get_logger()

EMPTY_MODEL_NUMBER_MESSAGE = "Prosím, zadejte modelové číslo."
LOOKUP_FAILED_MESSAGE = (
    "Nepodařilo se identifikovat zařízení. "
    "Zkuste to prosím později nebo zadejte model ručně."
)


class DeviceIdentifier:
    """Looks up a device name by model number and screens suspect answers.

    A response is rejected when it is ``max_length`` characters or longer, or
    when it contains one of ``suspect_phrases`` (case-insensitive). Both
    default to the values in settings.
    """

    def __init__(
        self,
        generate: Optional[TextGenerator] = None,
        max_length: Optional[int] = None,
        suspect_phrases: Optional[Sequence[str]] = None,
    ):
        self.generate = generate or generate_text
        self.max_length = max_length if max_length is not None else settings.lookup_max_length
        phrases = suspect_phrases if suspect_phrases is not None else settings.lookup_suspect_phrases
        self.suspect_phrases = tuple(p.lower() for p in phrases)

    async def identify(self, model_number: str) -> str:
        """Return the full device name, e.g. "Samsung Galaxy S21 Ultra"."""
        model_number = (model_number or "").strip()
        if not model_number:
            raise InvalidInput(EMPTY_MODEL_NUMBER_MESSAGE)

        try:
            raw_text = await self.generate(
                DEVICE_LOOKUP_USER_PROMPT.format(model_number=model_number),
                DEVICE_LOOKUP_SYSTEM_PROMPT,
                response_format="text",
                temperature=settings.lookup_temperature,
            )
        except Exception as e:
            error = classify_failure(e, LOOKUP_FAILED_MESSAGE)
            logger.error(
                "llm_request_failed",
                operation="device_lookup",
                kind=error.kind.value,
                error=str(e),
            )
            if error is e:
                raise
            raise error from e

        name = (raw_text or "").strip()
        if not name:
            logger.info("device_not_recognized", model_number=model_number)
            raise NotRecognized()

        if self._is_suspect(name):
            logger.warning(
                "device_lookup_suspect_response",
                model_number=model_number,
                response=name[:200],
            )
            raise UnreliableResponse(detail=name[:200])

        logger.info("device_identified", model_number=model_number, device_name=name)
        return name

    def _is_suspect(self, name: str) -> bool:
        if len(name) >= self.max_length:
            return True
        lowered = name.lower()
        return any(phrase in lowered for phrase in self.suspect_phrases)
