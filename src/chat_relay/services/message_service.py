from __future__ import annotations

from chat_relay.application.dto.message import NewMessageDTO, SendMessageDTO
from chat_relay.application.uow import UnitOfWork
from chat_relay.domain.entities.message import Message
from chat_relay.domain.value_objects.names import ANONYMOUS
from chat_relay.infrastructure.ws.manager import ADMINS_GROUP, user_group
from chat_relay.services.session_directory import SessionDirectory


def resolve_target(
    connection_id: str,
    request: SendMessageDTO,
    directory: SessionDirectory,
) -> str:
    """Explicit userId, else the sender's own identity, else the raw connection id."""
    return request.user_id or directory.user_for(connection_id) or connection_id


def build_message(
    connection_id: str,
    request: SendMessageDTO,
    directory: SessionDirectory,
) -> NewMessageDTO:
    target = resolve_target(connection_id, request, directory)
    profile = directory.profile(target)
    username = request.username or (profile.username if profile else None) or ANONYMOUS
    return NewMessageDTO(
        username=username,
        user_id=target,
        message=request.message,
        from_admin=request.from_admin,
    )


def recipient_groups(message: Message) -> list[str]:
    """The admin pool and the thread owner's group, always both."""
    return [ADMINS_GROUP, user_group(message.user_id)]


async def get_chat_history(user_id: str | None, uow: UnitOfWork) -> list[Message]:
    """Full thread for a user, oldest first. No user id means no store access."""
    if not user_id:
        return []
    async with uow:
        return await uow.messages.list_for_user(user_id)


async def send_message(
    connection_id: str,
    request: SendMessageDTO,
    directory: SessionDirectory,
    uow: UnitOfWork,
) -> Message:
    draft = build_message(connection_id, request, directory)
    async with uow:
        msg = await uow.messages_w.create(draft)
        await uow.commit()
    return msg
