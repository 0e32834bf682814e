"""
Dispatch cycle for a single chat turn.

A cycle moves the session IDLE -> PENDING -> IDLE:

- the user text is trimmed; blank input is ignored outright
- a send while another cycle is pending is dropped, not queued
- the user message is appended before the backend is called
- the reply, or a classified error message, is appended when it resolves
- the pending/typing flags are always cleared afterwards

Nothing raised by the backend escapes `dispatch`; failures end up in the
conversation as assistant messages.
"""

from enum import Enum
from typing import Callable, List, Optional, Sequence, Union

import structlog

from ..domain.models import Failure, HistoryEntry, Reply
from ..repositories.base import ConversationStore
from .backend import ChatBackend
from .classifier import classify, user_message
from .metadata import MetadataTracker

logger = structlog.get_logger()


class SessionEvent(str, Enum):
    """Output events for the presentation layer."""

    STATE_CHANGED = "state_changed"  # re-render, scroll to bottom
    FOCUS_INPUT = "focus_input"


Listener = Callable[[SessionEvent], None]


class RequestDispatcher:
    """Runs dispatch cycles against a store, a tracker and a backend."""

    def __init__(
        self,
        store: ConversationStore,
        tracker: MetadataTracker,
        backend: ChatBackend,
    ) -> None:
        self.store = store
        self.tracker = tracker
        self.backend = backend
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: SessionEvent) -> None:
        """Notify listeners; a failing listener never breaks the cycle."""
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error("event_listener_error", event_name=event.value, error=str(e))

    async def dispatch(
        self,
        user_text: str,
        history: Optional[Sequence[HistoryEntry]] = None,
    ) -> Optional[Union[Reply, Failure]]:
        """
        Run one cycle for `user_text`.

        `history` defaults to the conversation as it stood before this
        message. Returns None when the send was ignored (blank or busy).
        """
        text = user_text.strip()
        if not text:
            return None

        # Check-and-set happens before the first await.
        if not self.store.begin_cycle():
            logger.info("dispatch_dropped", reason="pending", message_length=len(text))
            return None

        try:
            context = list(history) if history is not None else self.store.history()
            self.store.append_user(text)
            self.emit(SessionEvent.STATE_CHANGED)
            logger.info("dispatch_started", message_length=len(text), history_length=len(context))

            outcome = await self._send(text, context)

            if isinstance(outcome, Reply):
                self.store.append_assistant(outcome.text)
                if outcome.data is not None:
                    self.tracker.update(outcome.data)
                logger.info("dispatch_completed", response_length=len(outcome.text))
            else:
                category = classify(outcome.error)
                self.store.append_assistant(user_message(category))
                logger.warning(
                    "dispatch_failed",
                    category=category.value,
                    status_code=outcome.status_code,
                    error=outcome.error,
                )
            return outcome
        finally:
            self.store.end_cycle()
            self.emit(SessionEvent.STATE_CHANGED)
            self.emit(SessionEvent.FOCUS_INPUT)

    async def _send(self, text: str, history: List[HistoryEntry]) -> Union[Reply, Failure]:
        try:
            return await self.backend.send(text, history)
        except Exception as e:
            logger.error("backend_error", error=str(e))
            return Failure(error=str(e) or None)
