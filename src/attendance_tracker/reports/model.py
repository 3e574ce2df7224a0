from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..attendance.model import AttendanceSession
from ..common.datetime_utils import to_iso_timestamp
from ..core.constants import HOURS_PRECISION
from ..core.enums import AttendanceStatus
from ..users.model import User


def round_hours(value: float) -> float:
    """Presentation rounding; aggregates stay unrounded until here."""
    return round(float(value), HOURS_PRECISION)


@dataclass(frozen=True)
class DaySummary:
    work_date: date
    sessions: tuple[AttendanceSession, ...]
    total_hours: float
    status: AttendanceStatus

    @property
    def sessions_count(self) -> int:
        return len(self.sessions)

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "dayName": self.work_date.strftime("%A"),
            "sessions": [s.to_dict() for s in self.sessions],
            "sessionsCount": self.sessions_count,
            "totalHours": round_hours(self.total_hours),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    start: date
    end: date
    total_hours: float
    present_days: int
    late_days: int
    half_day_days: int
    absent_days: int
    sessions_count: int

    @property
    def counted_days(self) -> int:
        return self.present_days + self.late_days + self.half_day_days + self.absent_days

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "totalHours": round_hours(self.total_hours),
            "presentDays": self.present_days,
            "lateDays": self.late_days,
            "halfDayDays": self.half_day_days,
            "absentDays": self.absent_days,
            "sessionsCount": self.sessions_count,
        }


@dataclass(frozen=True)
class EmployeeReport:
    user: User
    summary: AttendanceSummary

    def to_dict(self) -> dict:
        data = self.user.to_public_dict()
        data.pop("role", None)
        data.update(self.summary.to_dict())
        return data


@dataclass(frozen=True)
class LateArrival:
    user: User
    check_in_time: datetime

    def to_dict(self) -> dict:
        return {
            "userId": self.user.user_id,
            "name": self.user.full_name,
            "department": self.user.department or "",
            "checkInTime": to_iso_timestamp(self.check_in_time),
        }


@dataclass(frozen=True)
class TeamTodayStatus:
    work_date: date
    present: list[User] = field(default_factory=list)
    late: list[User] = field(default_factory=list)
    absent: list[User] = field(default_factory=list)
    late_arrivals: list[LateArrival] = field(default_factory=list)
    department: Optional[str] = None

    @property
    def total_employees(self) -> int:
        return len(self.present) + len(self.late) + len(self.absent)

    def to_dict(self) -> dict:
        def _brief(u: User) -> dict:
            return {"userId": u.user_id, "name": u.full_name, "department": u.department or ""}

        return {
            "date": self.work_date.isoformat(),
            "department": self.department,
            "totalEmployees": self.total_employees,
            "presentCount": len(self.present),
            "lateCount": len(self.late),
            "absentCount": len(self.absent),
            "present": [_brief(u) for u in self.present],
            "late": [_brief(u) for u in self.late],
            "absent": [_brief(u) for u in self.absent],
            "lateArrivals": [a.to_dict() for a in self.late_arrivals],
        }


@dataclass(frozen=True)
class TeamSummary:
    start: date
    end: date
    total_hours: float
    sessions_count: int
    by_department: dict[str, float]
    department: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "department": self.department,
            "totalHours": round_hours(self.total_hours),
            "sessionsCount": self.sessions_count,
            "byDepartment": {name: round_hours(hours) for name, hours in self.by_department.items()},
        }
