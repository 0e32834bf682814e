"""
Session facade for the presentation layer.

The presentation layer reads `view()` and sends three intents: `submit`,
`select_suggestion` and `clear`. Focus and scrolling are left to it and are
requested through `SessionEvent`s delivered to subscribed listeners.
"""

from typing import Optional, Tuple, Union

import structlog

from ..config import ChatSettings
from ..domain.models import ConversationView, Failure, Reply
from ..repositories.memory import InMemoryConversationStore
from ..services.backend import ChatBackend, HttpChatBackend
from ..services.dispatcher import Listener, RequestDispatcher, SessionEvent
from ..services.metadata import MetadataTracker

logger = structlog.get_logger()

SUGGESTED_QUERIES: Tuple[str, ...] = (
    "¿Cuál es la última imagen en la base de datos?",
    "¿Hay alguna imagen similar a la última subida?",
    "¿Cuál es el sentimiento general de los últimos textos?",
    "Resume los últimos 3 documentos",
    "¿Hay audios en español?",
)


class ChatSession:
    """One conversation with the assistant, from creation to teardown."""

    def __init__(self, backend: ChatBackend) -> None:
        self._store = InMemoryConversationStore()
        self._tracker = MetadataTracker()
        self._dispatcher = RequestDispatcher(self._store, self._tracker, backend)
        logger.info("chat_session_started", backend=type(backend).__name__)

    @classmethod
    def from_settings(cls, settings: Optional[ChatSettings] = None) -> "ChatSession":
        """Create a session talking HTTP to the configured service."""
        return cls(HttpChatBackend(settings or ChatSettings.from_env()))

    @property
    def suggested_queries(self) -> Tuple[str, ...]:
        return SUGGESTED_QUERIES

    def view(self) -> ConversationView:
        """Read-only snapshot of everything the presentation layer renders."""
        return ConversationView(
            messages=self._store.messages,
            pending=self._store.pending,
            typing=self._store.typing,
            db_stats=self._tracker.stats,
            suggested_queries=SUGGESTED_QUERIES,
        )

    def subscribe(self, listener: Listener) -> None:
        self._dispatcher.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._dispatcher.unsubscribe(listener)

    async def submit(self, text: str) -> Optional[Union[Reply, Failure]]:
        """Send text typed by the user."""
        return await self._dispatcher.dispatch(text)

    async def select_suggestion(self, text: str) -> Optional[Union[Reply, Failure]]:
        """Send a suggested query exactly as if it had been typed."""
        return await self.submit(text)

    def clear(self, include_stats: bool = False) -> None:
        """Empty the conversation; stats survive unless `include_stats` is set."""
        self._store.reset()
        if include_stats:
            self._tracker.clear()
        self._dispatcher.emit(SessionEvent.STATE_CHANGED)
        self._dispatcher.emit(SessionEvent.FOCUS_INPUT)

    async def aclose(self) -> None:
        await self._dispatcher.backend.aclose()
        logger.info("chat_session_closed", messages=len(self._store.messages))

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
