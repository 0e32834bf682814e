"""Domain models for the chat front-end."""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """Message model."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    role: Role
    timestamp: datetime


class HistoryEntry(BaseModel):
    """Message as sent on the wire: content and role only."""

    content: str
    role: Role


class ConversationState(BaseModel):
    """Ordered message sequence plus the in-flight flags."""

    messages: List[Message] = []
    pending: bool = False
    typing: bool = False


class DbStats(BaseModel):
    """Summary of the content database returned alongside replies.

    `types` is required. `latest_update` is kept exactly as the service sent it.
    """

    total_records: int
    types: List[str]
    related_records: Optional[int] = None
    latest_update: Optional[str] = None


class ChatRequest(BaseModel):
    """Request body for the chat endpoint."""

    message: str
    history: List[HistoryEntry] = []


class ChatResponse(BaseModel):
    """Success body from the chat endpoint."""

    response: str
    # Validated on its own so a bad block never costs the reply.
    data: Optional[Any] = None


class Reply(BaseModel):
    """Resolved assistant reply."""

    text: str
    data: Optional[DbStats] = None


class Failure(BaseModel):
    """Failed dispatch cycle; `error` is the raw text handed to the classifier."""

    error: Optional[str] = None
    status_code: Optional[int] = None


class ConversationView(BaseModel):
    """Read-only snapshot handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    messages: Tuple[Message, ...] = ()
    pending: bool = False
    typing: bool = False
    db_stats: Optional[DbStats] = None
    suggested_queries: Tuple[str, ...] = Field(default_factory=tuple)
