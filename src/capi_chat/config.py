"""Runtime settings read from the environment."""

import os
from typing import Optional

from pydantic import BaseModel

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_CHAT_PATH = "/api/chat"


class ChatSettings(BaseModel):
    """Where the assistant service lives and how long to wait for it."""

    base_url: str = DEFAULT_BASE_URL
    chat_path: str = DEFAULT_CHAT_PATH
    # None waits as long as the transport does.
    request_timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "ChatSettings":
        """Build settings from CAPI_* environment variables."""
        timeout = os.getenv("CAPI_REQUEST_TIMEOUT")
        return cls(
            base_url=os.getenv("CAPI_API_BASE_URL", DEFAULT_BASE_URL),
            chat_path=os.getenv("CAPI_CHAT_PATH", DEFAULT_CHAT_PATH),
            request_timeout=float(timeout) if timeout else None,
        )
