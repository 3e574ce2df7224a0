from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso_timestamp
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one check-in/check-out cycle of a user on a calendar date."""

    session_id: int
    user_id: int
    work_date: date
    session_number: int
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    total_hours: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    def closed(self, *, check_out_time: datetime, total_hours: float) -> "AttendanceSession":
        return replace(self, check_out_time=check_out_time, total_hours=total_hours)

    def to_dict(self) -> dict:
        return {
            "id": self.session_id,
            "userId": self.user_id,
            "date": self.work_date.isoformat(),
            "sessionNumber": self.session_number,
            "checkInTime": to_iso_timestamp(self.check_in_time),
            "checkOutTime": to_iso_timestamp(self.check_out_time) or None,
            "status": self.status.value,
            "totalHours": round(self.total_hours, 2),
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports: a session joined with its owner."""

    session: AttendanceSession
    employee_code: str
    full_name: str
    email: str
    department: Optional[str]

    @property
    def user_id(self) -> int:
        return self.session.user_id

    @property
    def work_date(self) -> date:
        return self.session.work_date

    def to_dict(self) -> dict:
        data = self.session.to_dict()
        data.update(
            {
                "employeeId": self.employee_code,
                "employeeName": self.full_name,
                "email": self.email,
                "department": self.department or "",
            }
        )
        return data
