"""In-memory record of who is connected, under which identity and role."""
from __future__ import annotations

import logging
from typing import Any

from chat_relay.domain.entities.profile import UserProfile
from chat_relay.domain.value_objects.enums import Role
from chat_relay.domain.value_objects.names import ANONYMOUS

logger = logging.getLogger(__name__)


class SessionDirectory:
    """Profiles keyed by user id plus the connection → user index.

    Every operation is total: missing fields are defaulted, unknown
    connections are ignored. Owned by the application instance and
    mutated only from the event loop.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, UserProfile] = {}
        self._connection_to_user: dict[str, str] = {}

    def join(
        self,
        connection_id: str,
        username: str | None = None,
        role: str | None = None,
        user_id: str | None = None,
    ) -> str:
        """Upsert the profile for a joining connection and return its user id."""
        resolved = user_id or connection_id
        profile = self._profiles.setdefault(resolved, UserProfile())
        profile.username = username or ANONYMOUS
        profile.role = Role.parse(role)
        profile.connection_id = connection_id
        profile.online = True
        self._connection_to_user[connection_id] = resolved
        logger.info("Joined: connection=%s user_id=%s role=%s", connection_id, resolved, profile.role)
        return resolved

    def disconnect(self, connection_id: str) -> str | None:
        user_id = self._connection_to_user.pop(connection_id, None)
        if user_id is None:
            return None
        profile = self._profiles.get(user_id)
        if profile is not None:
            profile.online = False
            profile.connection_id = None
        return user_id

    def user_for(self, connection_id: str) -> str | None:
        return self._connection_to_user.get(connection_id)

    def profile(self, user_id: str) -> UserProfile | None:
        return self._profiles.get(user_id)

    def public_view(self) -> dict[str, dict[str, Any]]:
        """Presence of every non-admin user; admins never see each other."""
        return {
            uid: {"username": p.username or ANONYMOUS, "online": p.online}
            for uid, p in self._profiles.items()
            if not p.is_admin
        }
