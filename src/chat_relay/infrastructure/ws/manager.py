"""In-process connection registry and broadcast groups."""
from __future__ import annotations

import logging
import uuid
from typing import Any

from chat_relay.infrastructure.ws.protocol import Connection, WsOutbound

logger = logging.getLogger(__name__)

ADMINS_GROUP = "admins"


def user_group(user_id: str) -> str:
    return f"user:{user_id}"


class ConnectionManager:
    """Tracks live connections by id and their membership in named groups."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}
        self._groups: dict[str, set[str]] = {}

    def register(self, conn: Connection) -> str:
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = conn
        logger.debug("Connection registered: %s (total=%d)", connection_id, len(self._connections))
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)
        for name in [g for g, members in self._groups.items() if connection_id in members]:
            self.leave_group(connection_id, name)
        logger.debug("Connection removed: %s", connection_id)

    def join_group(self, connection_id: str, group: str) -> None:
        self._groups.setdefault(group, set()).add(connection_id)
        logger.debug("%s joined group %s", connection_id, group)

    def leave_group(self, connection_id: str, group: str) -> None:
        members = self._groups.get(group)
        if members:
            members.discard(connection_id)
            if not members:
                del self._groups[group]

    def members(self, group: str) -> set[str]:
        return set(self._groups.get(group, set()))

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    async def send_to_connection(
        self,
        connection_id: str,
        event_type: str,
        data: Any,
    ) -> None:
        """Send one event to a single connection."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        await self._deliver([connection_id], raw)

    async def broadcast_to_group(
        self,
        group: str,
        event_type: str,
        data: Any,
    ) -> None:
        """Send one event to every connection in a group. Failed sends are dropped."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        await self._deliver(sorted(self._groups.get(group, set())), raw)

    async def _deliver(self, connection_ids: list[str], raw: str) -> None:
        dead: list[str] = []
        for cid in connection_ids:
            conn = self._connections.get(cid)
            if conn is None:
                continue
            try:
                await conn.send_text(raw)
            except Exception:
                dead.append(cid)
        for cid in dead:
            logger.warning("Dropping unreachable connection %s", cid)
            self.disconnect(cid)
