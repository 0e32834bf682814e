"""Base conversation store interface."""

from abc import ABC, abstractmethod
from typing import List

from ..domain.models import ConversationState, HistoryEntry, Message


class ConversationStore(ABC):
    """Abstract base class for the single source of truth of a session's history."""

    @abstractmethod
    def append_user(self, text: str) -> Message:
        """Append a user message before any network activity."""
        pass

    @abstractmethod
    def append_assistant(self, text: str) -> Message:
        """Append an assistant message once a cycle resolves."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Clear the message sequence."""
        pass

    @abstractmethod
    def begin_cycle(self) -> bool:
        """Mark a dispatch cycle as in flight; False if one already is."""
        pass

    @abstractmethod
    def end_cycle(self) -> None:
        """Clear the pending and typing flags."""
        pass

    @abstractmethod
    def snapshot(self) -> ConversationState:
        """Return a copy of the current state."""
        pass

    @abstractmethod
    def history(self) -> List[HistoryEntry]:
        """Return the messages reduced to content/role pairs."""
        pass
