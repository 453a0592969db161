from __future__ import annotations

from pydantic import BaseModel


class PresenceEntry(BaseModel):
    username: str
    online: bool


OnlineUsers = dict[str, PresenceEntry]
