from __future__ import annotations

from dataclasses import dataclass

from chat_relay.domain.value_objects.enums import Role
from chat_relay.domain.value_objects.names import ANONYMOUS


@dataclass(slots=True)
class UserProfile:
    """Presence record for one user id; outlives the connections that created it."""

    username: str = ANONYMOUS
    role: Role = Role.USER
    online: bool = False
    connection_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
