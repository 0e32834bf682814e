"""In-memory conversation store implementation."""

import time
from datetime import datetime, timezone
from typing import List, Tuple

import structlog

from ..domain.models import ConversationState, HistoryEntry, Message, Role
from .base import ConversationStore

logger = structlog.get_logger()


class InMemoryConversationStore(ConversationStore):
    """Session-scoped store; nothing outlives the instance.

    Writes come only from the dispatch cycle, which is serialized by the
    pending flag, so no lock is taken here.
    """

    def __init__(self) -> None:
        """Initialize an empty conversation."""
        self._state = ConversationState()
        self._last_id = 0
        logger.info("conversation_store_initialized")

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._state.messages)

    @property
    def pending(self) -> bool:
        return self._state.pending

    @property
    def typing(self) -> bool:
        return self._state.typing

    def _next_id(self) -> str:
        """Return a token that sorts after every token issued before it."""
        # time_ns can repeat or step back; never reuse or go below the last id.
        self._last_id = max(time.time_ns(), self._last_id + 1)
        return f"{self._last_id:020d}"

    def _append(self, text: str, role: Role) -> Message:
        message = Message(
            id=self._next_id(),
            content=text,
            role=role,
            timestamp=datetime.now(timezone.utc),
        )
        self._state.messages.append(message)
        logger.debug("message_added", message_id=message.id, message_role=role.value)
        return message

    def append_user(self, text: str) -> Message:
        """Append a user message before any network activity."""
        return self._append(text, Role.USER)

    def append_assistant(self, text: str) -> Message:
        """Append an assistant message once a cycle resolves."""
        return self._append(text, Role.ASSISTANT)

    def reset(self) -> None:
        """Clear the message sequence; flags and stats are left alone."""
        cleared = len(self._state.messages)
        self._state.messages = []
        logger.info("conversation_reset", cleared_messages=cleared)

    def begin_cycle(self) -> bool:
        """Mark a dispatch cycle as in flight; False if one already is."""
        if self._state.pending:
            return False
        self._state.pending = True
        self._state.typing = True
        return True

    def end_cycle(self) -> None:
        """Clear the pending and typing flags."""
        self._state.pending = False
        self._state.typing = False

    def snapshot(self) -> ConversationState:
        """Return a copy of the current state."""
        return self._state.model_copy(update={"messages": list(self._state.messages)})

    def history(self) -> List[HistoryEntry]:
        """Return the messages reduced to content/role pairs."""
        return [HistoryEntry(content=m.content, role=m.role) for m in self._state.messages]
