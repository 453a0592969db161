from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import ConfigDict, field_validator

from chat_relay.api.v1.schemas.common import CamelModel
from chat_relay.application.dto.message import SendMessageDTO
from chat_relay.domain.entities.message import Message


class _InboundPayload(CamelModel):
    """Client payloads are defaulted, not rejected."""

    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class JoinPayload(_InboundPayload):
    username: str | None = None
    role: str | None = None
    user_id: str | None = None


class HistoryRequest(_InboundPayload):
    user_id: str | None = None


class SendMessagePayload(_InboundPayload):
    user_id: str | None = None
    username: str | None = None
    message: str = ""
    from_admin: bool = False

    @field_validator("message", mode="before")
    @classmethod
    def _missing_message(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("from_admin", mode="before")
    @classmethod
    def _truthy(cls, v: Any) -> bool:
        return bool(v)


class MessageResponse(CamelModel):
    id: UUID
    username: str
    user_id: str
    message: str
    from_admin: bool
    timestamp: datetime


def message_to_wire(message: Message) -> dict[str, Any]:
    return MessageResponse.model_validate(message).model_dump(mode="json", by_alias=True)


def send_payload_to_dto(payload: SendMessagePayload) -> SendMessageDTO:
    return SendMessageDTO(
        message=payload.message,
        user_id=payload.user_id,
        username=payload.username,
        from_admin=payload.from_admin,
    )
