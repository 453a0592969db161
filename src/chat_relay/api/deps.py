"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from chat_relay.application.uow import UnitOfWork
from chat_relay.infrastructure.ws.manager import ConnectionManager
from chat_relay.services.session_directory import SessionDirectory


def get_directory(conn: HTTPConnection) -> SessionDirectory:
    return conn.app.state.directory


def get_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.manager


def get_uow(conn: HTTPConnection) -> UnitOfWork:
    """A fresh, not yet entered unit of work from the factory set at startup."""
    return conn.app.state.uow_factory()


DirectoryDep = Annotated[SessionDirectory, Depends(get_directory)]
ManagerDep = Annotated[ConnectionManager, Depends(get_manager)]
UoWDep = Annotated[UnitOfWork, Depends(get_uow)]
