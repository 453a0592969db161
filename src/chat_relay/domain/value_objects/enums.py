from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, raw: object) -> Role:
        """Self-declared role; anything but "admin" is a regular user."""
        return cls.ADMIN if raw == cls.ADMIN.value else cls.USER
