from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class AttendanceStatus(str, Enum):
    """Status stored on every attendance session."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half-day"
    ABSENT = "absent"


class Period(str, Enum):
    """Named reporting periods accepted by the range resolver."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
