"""WebSocket message envelope models."""
from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel


class WsInbound(BaseModel):
    """Client → Server."""

    type: str  # join | get-chat-history | send-message | ping
    data: Any = None

    @property
    def payload(self) -> dict[str, Any]:
        return self.data if isinstance(self.data, dict) else {}


class WsOutbound(BaseModel):
    """Server → Client."""

    type: str  # online-users | chat-history | receive-message | error | pong
    data: Any = None


class Connection(Protocol):
    """Anything the manager can push text frames to (a WebSocket in production)."""

    async def send_text(self, data: str) -> None: ...
