from __future__ import annotations

import logging

from chat_relay.domain.value_objects.enums import Role
from chat_relay.infrastructure.ws.manager import (
    ADMINS_GROUP,
    ConnectionManager,
    user_group,
)
from chat_relay.services.presence_service import (
    broadcast_presence,
    send_presence_snapshot,
)
from chat_relay.services.session_directory import SessionDirectory

logger = logging.getLogger(__name__)


async def join(
    connection_id: str,
    directory: SessionDirectory,
    manager: ConnectionManager,
    *,
    username: str | None = None,
    role: str | None = None,
    user_id: str | None = None,
) -> str:
    """Handle a join event; returns the resolved user id.

    Admins go to the admin pool and get an immediate snapshot. Everyone
    else joins the group for their own user id and every admin is told.
    """
    resolved = directory.join(connection_id, username=username, role=role, user_id=user_id)

    if Role.parse(role) is Role.ADMIN:
        manager.join_group(connection_id, ADMINS_GROUP)
        await send_presence_snapshot(connection_id, directory, manager)
    else:
        manager.join_group(connection_id, user_group(resolved))
        await broadcast_presence(directory, manager)
    return resolved


async def leave(
    connection_id: str,
    directory: SessionDirectory,
    manager: ConnectionManager,
) -> None:
    manager.disconnect(connection_id)
    user_id = directory.disconnect(connection_id)
    logger.info("Disconnected: connection=%s user_id=%s", connection_id, user_id)
    await broadcast_presence(directory, manager)
