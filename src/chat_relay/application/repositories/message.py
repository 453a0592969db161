from __future__ import annotations

from typing import Protocol

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_for_user(self, user_id: str) -> list[Message]:
        """All messages of one user thread, oldest first."""
        ...


class MessageWriter(Protocol):
    async def create(self, draft: NewMessageDTO) -> Message:
        """Insert a message; the store assigns id and timestamp."""
        ...
