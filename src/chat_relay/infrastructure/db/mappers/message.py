from __future__ import annotations

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.domain.entities.message import Message
from chat_relay.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        username=model.username,
        user_id=model.user_id,
        message=model.message,
        from_admin=model.from_admin,
        timestamp=model.timestamp,
    )


def draft_to_values(draft: NewMessageDTO) -> dict[str, object]:
    return {
        "username": draft.username,
        "user_id": draft.user_id,
        "message": draft.message,
        "from_admin": draft.from_admin,
    }
