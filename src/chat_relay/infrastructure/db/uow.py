from __future__ import annotations

from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chat_relay.application.exceptions import StoreError
from chat_relay.infrastructure.db.errors import STORE_ERRORS
from chat_relay.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)


class SqlAlchemyUoW:
    """Concrete Unit-of-Work backed by a single AsyncSession.

    The session does not touch the database until the first statement,
    so one instance is built per store operation and used as `async with`.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session = session_factory()
        self.messages = MessageReaderRepo(self._session)
        self.messages_w = MessageWriterRepo(self._session)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is not None:
                await self.rollback()
        finally:
            await self._session.close()

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except STORE_ERRORS as exc:
            raise StoreError("commit failed") from exc

    async def rollback(self) -> None:
        try:
            await self._session.rollback()
        except STORE_ERRORS as exc:
            raise StoreError("rollback failed") from exc
