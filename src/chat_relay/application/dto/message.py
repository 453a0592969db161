from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SendMessageDTO:
    """What a client asked to send; identity and name may still be unresolved."""

    message: str = ""
    user_id: str | None = None
    username: str | None = None
    from_admin: bool = False


@dataclass(frozen=True, slots=True)
class NewMessageDTO:
    username: str
    user_id: str
    message: str
    from_admin: bool = False
