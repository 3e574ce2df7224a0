from __future__ import annotations

import logging
from datetime import date
from typing import Iterator, Optional, Sequence

from ..attendance.model import AttendanceReportRow, AttendanceSession
from ..attendance.repository import AttendanceRepository
from ..common.date_range import DateRange, month_bounds
from ..common.datetime_utils import Clock, now_local
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..users.model import User
from ..users.repository import UserRepository
from . import aggregator
from .model import AttendanceSummary, EmployeeReport, TeamSummary, TeamTodayStatus

logger = logging.getLogger(__name__)


class ReportService:
    """Read-side use cases: summaries, team views and export rows.

    Filters that match nothing (unknown department, user without sessions)
    produce empty results rather than errors.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._clock = clock or now_local

    def today(self) -> date:
        return self._clock().date()

    def summary_for_user(self, user_id: int, date_range: DateRange) -> AttendanceSummary:
        sessions = self._attendance.list_for_user(user_id, start_date=date_range.start, end_date=date_range.end)
        return aggregator.summarize(sessions, date_range.start, date_range.end, as_of=self.today())

    def team_rows(self, date_range: DateRange, *, department: Optional[str] = None) -> Sequence[AttendanceReportRow]:
        return self._attendance.get_report_rows(
            start_date=date_range.start,
            end_date=date_range.end,
            department=department or None,
        )

    def employee_detail(
        self, employee_id: int, date_range: DateRange
    ) -> tuple[User, Sequence[AttendanceSession], AttendanceSummary]:
        user = self._users.get_by_id(employee_id)
        if not user:
            raise NotFoundError("Employee not found")
        sessions = self._attendance.list_for_user(
            employee_id, start_date=date_range.start, end_date=date_range.end
        )
        summary = aggregator.summarize(sessions, date_range.start, date_range.end, as_of=self.today())
        return user, sessions, summary

    def team_summary(self, date_range: DateRange, *, department: Optional[str] = None) -> TeamSummary:
        rows = self.team_rows(date_range, department=department)
        users = self._users.list_active(department=department or None)
        return TeamSummary(
            start=date_range.start,
            end=date_range.end,
            total_hours=aggregator.total_hours(rows),
            sessions_count=len(rows),
            by_department=aggregator.department_hours(rows, users),
            department=department or None,
        )

    def team_today(self, *, department: Optional[str] = None) -> TeamTodayStatus:
        today = self.today()
        employees = self._users.list_active(role=Role.EMPLOYEE, department=department or None)
        sessions = self._attendance.list_for_date(today)
        return aggregator.team_today(employees, sessions, work_date=today, department=department or None)

    def employee_reports(self, date_range: DateRange, *, department: Optional[str] = None) -> list[EmployeeReport]:
        users = self._users.list_active(role=Role.EMPLOYEE, department=department or None)
        rows = self.team_rows(date_range, department=department)
        return aggregator.employee_report(users, rows, date_range.start, date_range.end, as_of=self.today())

    def export_rows(self, date_range: DateRange, *, department: Optional[str] = None) -> Iterator[AttendanceReportRow]:
        logger.info("export requested: %s..%s department=%s", date_range.start, date_range.end, department or "*")
        return self._attendance.iter_report_rows(
            start_date=date_range.start,
            end_date=date_range.end,
            department=department or None,
        )

    def employee_dashboard(self, user_id: int) -> AttendanceSummary:
        return self.summary_for_user(user_id, month_bounds(self.today()))

    def manager_dashboard(self) -> dict:
        month = month_bounds(self.today())
        team = self.team_summary(month)
        today = self.team_today()
        return {
            "month": team.to_dict(),
            "today": {
                "date": today.work_date.isoformat(),
                "totalEmployees": today.total_employees,
                "presentCount": len(today.present),
                "lateCount": len(today.late),
                "absentCount": len(today.absent),
            },
        }
