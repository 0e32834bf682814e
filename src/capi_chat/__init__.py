"""Chat front-end controller for the Capi assistant."""

from .api.session import SUGGESTED_QUERIES, ChatSession
from .config import ChatSettings
from .services.classifier import ErrorCategory, classify
from .services.dispatcher import SessionEvent

__all__ = [
    "ChatSession",
    "ChatSettings",
    "ErrorCategory",
    "SUGGESTED_QUERIES",
    "SessionEvent",
    "classify",
]
