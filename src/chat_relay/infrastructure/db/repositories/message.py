from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.exceptions import StoreError
from chat_relay.domain.entities.message import Message
from chat_relay.infrastructure.db.errors import STORE_ERRORS
from chat_relay.infrastructure.db.mappers import message as mapper
from chat_relay.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: str) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.user_id == user_id)
            .order_by(MessageModel.timestamp.asc(), MessageModel.id.asc())
        )
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as exc:
            raise StoreError(f"history query failed for user_id={user_id}") from exc
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, draft: NewMessageDTO) -> Message:
        values = mapper.draft_to_values(draft)
        values["id"] = uuid.uuid4()
        values["timestamp"] = datetime.now(timezone.utc)
        stmt = insert(MessageModel).values(**values).returning(MessageModel)
        try:
            result = await self._session.execute(stmt)
        except STORE_ERRORS as exc:
            raise StoreError(f"insert failed for user_id={draft.user_id}") from exc
        return mapper.model_to_entity(result.scalar_one())
