from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    MANAGER = "Manager"
    HR = "HR"
    HEADHUNTER = "Headhunter"
    BD = "BD"

    @classmethod
    def parse(cls, value: str | None) -> Optional[UserRole]:
        """Case-insensitive lookup by value; ``None`` when unknown."""
        if not value:
            return None
        for role in cls:
            if role.value.lower() == value.strip().lower():
                return role
        return None


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    access_token: str
    email: str = ""
    role: Optional[UserRole] = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
