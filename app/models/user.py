from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.models.types import UserRole


@dataclass
class User:
    id: str
    email: str
    hashed_password: str
    first_name: str
    last_name: str
    employee_id: str
    role: UserRole = UserRole.EMPLOYEE
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
