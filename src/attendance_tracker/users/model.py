from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a user of the tracker.

    Note: plain data object, no DB access. Attendance logic only reads it.
    """

    user_id: int
    employee_code: str
    full_name: str
    email: str
    password_hash: str
    role: Role
    department: Optional[str]
    is_active: bool = True

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "employeeId": self.employee_code,
            "name": self.full_name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department or "",
        }
