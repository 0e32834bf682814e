"""Shared fixtures for the chat controller tests."""

import asyncio
from typing import List, Optional, Sequence, Tuple, Union

import pytest

from capi_chat.domain.models import Failure, HistoryEntry, Reply
from capi_chat.services.backend import ChatBackend


class FakeBackend(ChatBackend):
    """Backend returning scripted outcomes and recording every call."""

    def __init__(self, *outcomes: Union[Reply, Failure, Exception]) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[Tuple[str, List[HistoryEntry]]] = []
        self.gate: Optional[asyncio.Event] = None
        self.closed = False

    async def send(self, text: str, history: Sequence[HistoryEntry]) -> Union[Reply, Failure]:
        self.calls.append((text, list(history)))
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else Reply(text=f"echo: {text}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
