from __future__ import annotations

from fastapi import APIRouter

from chat_relay.api.deps import DirectoryDep, UoWDep
from chat_relay.api.v1.schemas.message import MessageResponse
from chat_relay.api.v1.schemas.presence import OnlineUsers
from chat_relay.services import message_service

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.get("/users/{user_id}/messages", response_model=list[MessageResponse])
async def list_messages(user_id: str, uow: UoWDep) -> list[MessageResponse]:
    messages = await message_service.get_chat_history(user_id, uow)
    return [MessageResponse.model_validate(m) for m in messages]


@router.get("/online-users", response_model=OnlineUsers)
async def online_users(directory: DirectoryDep) -> OnlineUsers:
    return directory.public_view()  # type: ignore[return-value]
