"""Shared test fixtures."""
from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import TracebackType
from typing import Any, Self

import pytest

from chat_relay.application.dto.message import NewMessageDTO
from chat_relay.application.exceptions import StoreError
from chat_relay.domain.entities.message import Message
from chat_relay.infrastructure.ws.manager import ConnectionManager
from chat_relay.services.session_directory import SessionDirectory

_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


@dataclass
class FakeConnection:
    """Records every frame the manager pushes to it."""

    frames: list[dict[str, Any]] = field(default_factory=list)
    broken: bool = False

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise ConnectionError("socket closed")
        self.frames.append(json.loads(data))

    def events(self, event_type: str) -> list[Any]:
        return [f["data"] for f in self.frames if f["type"] == event_type]


@dataclass
class FakeMessageStore:
    _messages: list[Message] = field(default_factory=list)
    fail: bool = False
    queries: int = 0

    def add(self, draft: NewMessageDTO) -> Message:
        msg = Message(
            id=uuid.uuid4(),
            username=draft.username,
            user_id=draft.user_id,
            message=draft.message,
            from_admin=draft.from_admin,
            timestamp=_EPOCH + timedelta(seconds=len(self._messages)),
        )
        self._messages.append(msg)
        return msg


@dataclass
class FakeMessageReader:
    _store: FakeMessageStore

    async def list_for_user(self, user_id: str) -> list[Message]:
        self._store.queries += 1
        if self._store.fail:
            raise StoreError("store unavailable")
        rows = [m for m in self._store._messages if m.user_id == user_id]
        return sorted(rows, key=lambda m: (m.timestamp, m.id))


@dataclass
class FakeMessageWriter:
    _store: FakeMessageStore

    async def create(self, draft: NewMessageDTO) -> Message:
        if self._store.fail:
            raise StoreError("store unavailable")
        return self._store.add(draft)


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    store: FakeMessageStore
    messages: FakeMessageReader = field(init=False)
    messages_w: FakeMessageWriter = field(init=False)
    _committed: bool = False
    _rolled_back: bool = False

    def __post_init__(self) -> None:
        self.messages = FakeMessageReader(self.store)
        self.messages_w = FakeMessageWriter(self.store)

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        self._rolled_back = True

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()


@pytest.fixture
def store() -> FakeMessageStore:
    return FakeMessageStore()


@pytest.fixture
def uow_factory(store):
    return lambda: FakeUoW(store)


@pytest.fixture
def directory() -> SessionDirectory:
    return SessionDirectory()


@pytest.fixture
def manager() -> ConnectionManager:
    return ConnectionManager()


def connect(manager: ConnectionManager) -> tuple[str, FakeConnection]:
    conn = FakeConnection()
    return manager.register(conn), conn
