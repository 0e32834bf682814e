"""Transport to the remote assistant service."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Union

import httpx
import structlog
from pydantic import ValidationError

from ..config import ChatSettings
from ..domain.models import ChatRequest, ChatResponse, DbStats, Failure, HistoryEntry, Reply

logger = structlog.get_logger()


class ChatBackend(ABC):
    """Capability that performs one request/response round trip."""

    @abstractmethod
    async def send(self, text: str, history: Sequence[HistoryEntry]) -> Union[Reply, Failure]:
        """Send a message with its prior history and return the outcome."""
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        pass


def _error_text(response: httpx.Response) -> Optional[str]:
    """Pull the most specific error text out of a failed response."""
    try:
        body: Any = response.json()
    except ValueError:
        return response.text or None

    if isinstance(body, dict):
        error = body.get("error", body.get("detail"))
        if isinstance(error, dict):
            # OpenAI-style {"error": {"message", "type", "code"}}
            parts = [str(error[key]) for key in ("message", "type", "code") if error.get(key)]
            return " ".join(parts) or None
        if error:
            return str(error)
    return response.text or None


def _parse_stats(data: Any) -> Optional[DbStats]:
    """Validate the optional data block; an unusable one is logged and dropped."""
    if data is None:
        return None
    try:
        return DbStats.model_validate(data)
    except ValidationError as e:
        logger.warning("chat_response_data_invalid", error=str(e))
        return None


class HttpChatBackend(ChatBackend):
    """Posts to the chat endpoint over httpx."""

    def __init__(
        self,
        settings: Optional[ChatSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or ChatSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=self.settings.request_timeout,
        )

    async def send(self, text: str, history: Sequence[HistoryEntry]) -> Union[Reply, Failure]:
        """POST the message and parse the reply, folding every error into a Failure."""
        payload = ChatRequest(message=text, history=list(history))
        try:
            response = await self._client.post(
                self.settings.chat_path,
                json=payload.model_dump(mode="json"),
            )
        except httpx.HTTPError as e:
            logger.warning("chat_request_failed", error=str(e))
            return Failure(error=str(e) or None)

        if not response.is_success:
            error = _error_text(response)
            logger.warning(
                "chat_request_failed",
                status_code=response.status_code,
                error=error,
            )
            return Failure(error=error, status_code=response.status_code)

        try:
            body = ChatResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning("chat_response_invalid", error=str(e))
            return Failure(error=str(e), status_code=response.status_code)

        return Reply(text=body.response, data=_parse_stats(body.data))

    async def aclose(self) -> None:
        """Close the HTTP client if this backend created it."""
        if self._owns_client:
            await self._client.aclose()
