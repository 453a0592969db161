from __future__ import annotations

from chat_relay.infrastructure.ws.manager import ADMINS_GROUP, ConnectionManager
from chat_relay.services.session_directory import SessionDirectory

ONLINE_USERS = "online-users"


async def broadcast_presence(
    directory: SessionDirectory,
    manager: ConnectionManager,
) -> None:
    """Push the full presence table to every admin connection."""
    await manager.broadcast_to_group(ADMINS_GROUP, ONLINE_USERS, directory.public_view())


async def send_presence_snapshot(
    connection_id: str,
    directory: SessionDirectory,
    manager: ConnectionManager,
) -> None:
    await manager.send_to_connection(connection_id, ONLINE_USERS, directory.public_view())
