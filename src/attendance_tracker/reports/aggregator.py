"""Pure aggregation over session records.

Nothing here touches storage or the clock; callers pass the rows and,
where it matters, the reference day.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceReportRow, AttendanceSession
from ..attendance.status import last_session, representative_status
from ..common.datetime_utils import is_working_day, iter_days
from ..core.constants import UNKNOWN_DEPARTMENT
from ..core.enums import AttendanceStatus, Role
from ..users.model import User
from .model import AttendanceSummary, DaySummary, EmployeeReport, LateArrival, TeamTodayStatus


def group_by_day(sessions: Iterable[AttendanceSession]) -> dict[date, list[AttendanceSession]]:
    days: dict[date, list[AttendanceSession]] = defaultdict(list)
    for s in sessions:
        days[s.work_date].append(s)
    for day_sessions in days.values():
        day_sessions.sort(key=lambda s: s.session_number)
    return dict(days)


def day_summary(work_date: date, sessions: Sequence[AttendanceSession]) -> DaySummary:
    ordered = tuple(sorted(sessions, key=lambda s: s.session_number))
    return DaySummary(
        work_date=work_date,
        sessions=ordered,
        total_hours=sum(s.total_hours for s in ordered),
        status=representative_status(ordered),
    )


def daily_breakdown(sessions: Iterable[AttendanceSession], days: Iterable[date]) -> list[DaySummary]:
    """One bucket per requested day, in the given order, empty days included."""
    by_day = group_by_day(sessions)
    return [day_summary(d, by_day.get(d, [])) for d in days]


def summarize(
    sessions: Iterable[AttendanceSession],
    start: date,
    end: date,
    *,
    as_of: Optional[date] = None,
) -> AttendanceSummary:
    """Totals and per-day status counts for one user over ``[start, end]``.

    Days are counted by their representative status. Working days without
    any session count as absent; weekends never do, and neither do days
    after ``as_of`` when it is given.

    Without ``as_of`` the four day counts add up to the working days of the
    range. With it, working days after ``as_of`` are left out of every count,
    so a range that runs past ``as_of`` (the current month, say) sums to the
    working days up to and including ``as_of`` only. Report endpoints pass
    today as ``as_of``.
    """
    in_range = [s for s in sessions if start <= s.work_date <= end]
    by_day = group_by_day(in_range)

    counts = {status: 0 for status in AttendanceStatus}
    for day_sessions in by_day.values():
        counts[representative_status(day_sessions)] += 1

    for day in iter_days(start, end):
        if day in by_day or not is_working_day(day):
            continue
        if as_of is not None and day > as_of:
            continue
        counts[AttendanceStatus.ABSENT] += 1

    return AttendanceSummary(
        start=start,
        end=end,
        total_hours=sum(s.total_hours for s in in_range),
        present_days=counts[AttendanceStatus.PRESENT],
        late_days=counts[AttendanceStatus.LATE],
        half_day_days=counts[AttendanceStatus.HALF_DAY],
        absent_days=counts[AttendanceStatus.ABSENT],
        sessions_count=len(in_range),
    )


def total_hours(rows: Iterable[AttendanceReportRow]) -> float:
    return sum(r.session.total_hours for r in rows)


def department_hours(rows: Iterable[AttendanceReportRow], users: Iterable[User]) -> dict[str, float]:
    """Session hours per department.

    Every department of an active user appears, with 0 when nobody logged
    time. Users without a department roll up under ``UNKNOWN_DEPARTMENT``.
    """
    totals: dict[str, float] = {}
    for user in users:
        if user.is_active:
            totals.setdefault(user.department or UNKNOWN_DEPARTMENT, 0.0)

    for row in rows:
        dept = row.department or UNKNOWN_DEPARTMENT
        totals[dept] = totals.get(dept, 0.0) + row.session.total_hours
    return dict(sorted(totals.items()))


def team_today(
    employees: Iterable[User],
    sessions_today: Iterable[AttendanceSession],
    *,
    work_date: date,
    department: Optional[str] = None,
) -> TeamTodayStatus:
    """Classify every active employee for ``work_date``.

    A user with any session (open or closed) takes the status of their last
    session; a user without one is absent. Late arrivals carry the check-in
    time of that last session.
    """
    by_user: Mapping[int, list[AttendanceSession]] = defaultdict(list)
    for s in sessions_today:
        if s.work_date == work_date:
            by_user[s.user_id].append(s)

    result = TeamTodayStatus(work_date=work_date, department=department)
    for user in employees:
        if not user.is_active or user.role != Role.EMPLOYEE:
            continue
        if department and user.department != department:
            continue

        latest = last_session(by_user.get(user.user_id, []))
        if latest is None:
            result.absent.append(user)
        elif latest.status == AttendanceStatus.LATE:
            result.late.append(user)
            result.late_arrivals.append(LateArrival(user=user, check_in_time=latest.check_in_time))
        else:
            result.present.append(user)

    result.late_arrivals.sort(key=lambda a: a.check_in_time)
    return result


def employee_report(
    users: Iterable[User],
    rows: Iterable[AttendanceReportRow],
    start: date,
    end: date,
    *,
    as_of: Optional[date] = None,
) -> list[EmployeeReport]:
    """Per-employee summaries over a range, one entry per listed user."""
    sessions_by_user: dict[int, list[AttendanceSession]] = defaultdict(list)
    for row in rows:
        sessions_by_user[row.user_id].append(row.session)

    reports = [
        EmployeeReport(user=u, summary=summarize(sessions_by_user.get(u.user_id, []), start, end, as_of=as_of))
        for u in users
    ]
    reports.sort(key=lambda r: r.user.full_name)
    return reports
