"""Failure taxonomy shared by the analysis requester and the device lookup.

Every failure that can reach the form is one of the ``DiagnosticsError``
subclasses below, each carrying a user-facing (Czech) message. Raw transport
errors from the LLM client are mapped with ``classify_failure``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    MALFORMED_RESPONSE = "malformed_response"
    NOT_RECOGNIZED = "not_recognized"
    UNRELIABLE_RESPONSE = "unreliable_response"
    UNAUTHORIZED = "unauthorized"
    QUOTA_EXCEEDED = "quota_exceeded"
    SAFETY_BLOCKED = "safety_blocked"
    UNKNOWN = "unknown"


class DiagnosticsError(Exception):
    """Base class for failures surfaced to the user."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    default_message: str = "Nepodařilo se získat odpověď od AI. Zkuste to prosím později."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class InvalidInput(DiagnosticsError):
    kind = ErrorKind.INVALID_INPUT
    default_message = "Prosím, vyplňte povinné pole."


class MalformedResponse(DiagnosticsError):
    kind = ErrorKind.MALFORMED_RESPONSE
    default_message = (
        "Odpověď od AI nemá očekávanou strukturu. "
        "Zkuste to prosím znovu s přesnějším popisem problému."
    )


class NotRecognized(DiagnosticsError):
    kind = ErrorKind.NOT_RECOGNIZED
    default_message = "Modelové číslo nebylo rozpoznáno nebo je nejednoznačné."


class UnreliableResponse(DiagnosticsError):
    kind = ErrorKind.UNRELIABLE_RESPONSE
    default_message = "Nepodařilo se spolehlivě identifikovat zařízení podle modelového čísla."


class Unauthorized(DiagnosticsError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "API klíč pro AI není platný nebo chybí. Zkontrolujte prosím konfiguraci."


class QuotaExceeded(DiagnosticsError):
    kind = ErrorKind.QUOTA_EXCEEDED
    default_message = "Byl překročen limit požadavků na API. Zkuste to prosím později."


class SafetyBlocked(DiagnosticsError):
    kind = ErrorKind.SAFETY_BLOCKED
    default_message = "Odpověď byla blokována z bezpečnostních důvodů. Zkuste přeformulovat dotaz."


class UnknownFailure(DiagnosticsError):
    kind = ErrorKind.UNKNOWN


MODEL_ACCESS_MESSAGE = (
    "Model nebyl nalezen nebo k němu nemáte oprávnění. "
    "Zkontrolujte název modelu (LLM_MODEL) a API klíč."
)


# Substrings are matched case-insensitively against "<ExceptionClass>: <message>".
UNAUTHORIZED_MARKERS = (
    "api key not valid",
    "api_key_invalid",
    "invalid x-api-key",
    "authentication_error",
    "authenticationerror",
)
# Key is fine but the configured model is missing or off-limits for it.
MODEL_ACCESS_MARKERS = (
    "permission_error",
    "permission_denied",
    "permissiondeniederror",
    "model not found",
    "not_found_error",
)
QUOTA_MARKERS = (
    "quota",
    "resource_exhausted",
    "rate_limit",
    "ratelimiterror",
    "credit balance is too low",
)
SAFETY_MARKERS = (
    "blocked due to safety",
    "safety",
    "content_filter",
)

# First match wins; a None message means the class default.
_MARKER_TABLE: tuple[tuple[tuple[str, ...], type[DiagnosticsError], Optional[str]], ...] = (
    (UNAUTHORIZED_MARKERS, Unauthorized, None),
    (MODEL_ACCESS_MARKERS, Unauthorized, MODEL_ACCESS_MESSAGE),
    (QUOTA_MARKERS, QuotaExceeded, None),
    (SAFETY_MARKERS, SafetyBlocked, None),
)


def classify_failure(
    exc: BaseException,
    fallback_message: Optional[str] = None,
) -> DiagnosticsError:
    """Map an arbitrary failure onto the taxonomy.

    ``DiagnosticsError`` instances are returned unchanged. Anything that
    matches none of the marker lists becomes ``UnknownFailure`` carrying
    ``fallback_message``.
    """
    if isinstance(exc, DiagnosticsError):
        return exc

    haystack = f"{type(exc).__name__}: {exc}".lower()
    for markers, error_cls, message in _MARKER_TABLE:
        if any(marker in haystack for marker in markers):
            return error_cls(message, detail=str(exc))

    return UnknownFailure(fallback_message, detail=str(exc))
