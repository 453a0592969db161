from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    username: str
    user_id: str
    message: str
    from_admin: bool
    timestamp: datetime
