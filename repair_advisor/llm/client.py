"""Anthropic async client singleton and the text-generation call."""

from __future__ import annotations

from typing import Literal, Optional, Protocol

import structlog
from anthropic import AsyncAnthropic

from repair_advisor.config import settings
from repair_advisor.errors import SafetyBlocked, Unauthorized

logger = structlog.get_logger()

ResponseFormat = Literal["json", "text"]

JSON_ONLY_SUFFIX = (
    "\n\nReturn a single valid JSON object and nothing else: "
    "no markdown, no code fences, no explanations."
)

_client: AsyncAnthropic | None = None


class TextGenerator(Protocol):
    """Callable that turns a prompt into raw model text."""

    async def __call__(
        self,
        prompt: str,
        system_instruction: str,
        *,
        response_format: ResponseFormat = "text",
        temperature: Optional[float] = None,
    ) -> str: ...


def get_llm_client() -> AsyncAnthropic:
    """Get or create the Anthropic async client."""
    global _client
    if _client is None:
        _client = AsyncAnthropic(api_key=settings.anthropic_api_key)
    return _client


async def generate_text(
    prompt: str,
    system_instruction: str,
    *,
    response_format: ResponseFormat = "text",
    temperature: Optional[float] = None,
) -> str:
    """Send one user prompt and return the concatenated text of the reply.

    Returns an empty string when the model produced no text blocks.
    """
    if not settings.anthropic_api_key:
        raise Unauthorized(
            "API klíč pro AI není nakonfigurován. "
            "Zkontrolujte proměnnou prostředí ANTHROPIC_API_KEY."
        )

    system = system_instruction
    if response_format == "json":
        system += JSON_ONLY_SUFFIX

    kwargs: dict = {}
    if temperature is not None:
        kwargs["temperature"] = temperature

    client = get_llm_client()
    response = await client.messages.create(
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        system=system,
        messages=[{"role": "user", "content": prompt}],
        **kwargs,
    )

    if getattr(response, "stop_reason", None) == "refusal":
        raise SafetyBlocked(detail="stop_reason=refusal")

    text = "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )
    logger.debug(
        "llm_text_generated",
        response_format=response_format,
        tokens_in=response.usage.input_tokens,
        tokens_out=response.usage.output_tokens,
        length=len(text),
    )
    return text
