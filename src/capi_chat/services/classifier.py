"""Mapping of raw backend failure text to user-facing error categories."""

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple


class ErrorCategory(str, Enum):
    """Fixed taxonomy of failures shown to the user."""

    MODEL_UNAVAILABLE = "model_unavailable"
    RATE_LIMITED = "rate_limited"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


DEFAULT_ERROR_TEXT = "unknown error"

LEAD_IN = "Lo siento, hubo un error procesando tu mensaje: "


def _contains(token: str) -> Callable[[str], bool]:
    return lambda text: token in text


# Evaluated top to bottom, first match wins. Order matters: a text carrying
# both "model_not_found" and "rate_limit" is a model problem.
CLASSIFICATION_RULES: List[Tuple[Callable[[str], bool], ErrorCategory]] = [
    (_contains("model_not_found"), ErrorCategory.MODEL_UNAVAILABLE),
    (_contains("rate_limit"), ErrorCategory.RATE_LIMITED),
    (_contains("invalid_request_error"), ErrorCategory.INVALID_REQUEST),
]

TEMPLATES: Dict[ErrorCategory, str] = {
    ErrorCategory.MODEL_UNAVAILABLE: (
        "Hay un problema con el modelo de AI. Por favor, contacta al administrador."
    ),
    ErrorCategory.RATE_LIMITED: (
        "Estamos procesando demasiadas peticiones. "
        "Por favor, espera un momento y vuelve a intentar."
    ),
    ErrorCategory.INVALID_REQUEST: (
        "La solicitud no es válida. Por favor, intenta reformular tu pregunta."
    ),
    ErrorCategory.UNKNOWN: "Por favor, intenta de nuevo en unos momentos.",
}


def classify(raw_text: Optional[str]) -> ErrorCategory:
    """Return the category of a raw failure text."""
    text = raw_text or DEFAULT_ERROR_TEXT
    for matches, category in CLASSIFICATION_RULES:
        if matches(text):
            return category
    return ErrorCategory.UNKNOWN


def user_message(category: ErrorCategory) -> str:
    """Localized message for a category, prefixed with the shared lead-in."""
    return LEAD_IN + TEMPLATES[category]


def describe_failure(raw_text: Optional[str]) -> str:
    """Classify a raw failure text and render it for the conversation."""
    return user_message(classify(raw_text))
