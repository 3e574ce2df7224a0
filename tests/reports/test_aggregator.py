from __future__ import annotations

from datetime import date, datetime

from conftest import make_user

from attendance_tracker.attendance.model import AttendanceReportRow, AttendanceSession
from attendance_tracker.core.enums import AttendanceStatus, Role
from attendance_tracker.reports import aggregator

_ids = iter(range(1, 10_000))


def s(day: int, number: int, status: AttendanceStatus, hours: float, *, user_id: int = 1, month: int = 1, open_=False):
    check_in = datetime(2024, month, day, 8 + number, 0)
    return AttendanceSession(
        session_id=next(_ids),
        user_id=user_id,
        work_date=date(2024, month, day),
        session_number=number,
        check_in_time=check_in,
        check_out_time=None if open_ else check_in,
        status=status,
        total_hours=hours,
    )


def row(session: AttendanceSession, user) -> AttendanceReportRow:
    return AttendanceReportRow(
        session=session,
        employee_code=user.employee_code,
        full_name=user.full_name,
        email=user.email,
        department=user.department,
    )


JANUARY_SESSIONS = [
    s(2, 1, AttendanceStatus.PRESENT, 8.0),
    s(3, 1, AttendanceStatus.PRESENT, 7.5),
    s(4, 1, AttendanceStatus.LATE, 6.25),
    s(5, 1, AttendanceStatus.HALF_DAY, 4.0),
    # multi-session day: last session decides
    s(8, 1, AttendanceStatus.PRESENT, 2.92),
    s(8, 2, AttendanceStatus.LATE, 4.5),
]


def test_full_month_day_counts_cover_every_working_day():
    summary = aggregator.summarize(JANUARY_SESSIONS, date(2024, 1, 1), date(2024, 1, 31))

    # January 2024 has 23 working days
    assert summary.counted_days == 23
    assert summary.present_days == 2
    assert summary.late_days == 2
    assert summary.half_day_days == 1
    assert summary.absent_days == 18
    assert summary.sessions_count == 6


def test_total_hours_is_sum_of_session_hours():
    summary = aggregator.summarize(JANUARY_SESSIONS, date(2024, 1, 1), date(2024, 1, 31))

    assert round(summary.total_hours, 2) == round(sum(x.total_hours for x in JANUARY_SESSIONS), 2)
    assert summary.to_dict()["totalHours"] == 33.17


def test_rounding_happens_only_at_presentation():
    sessions = [s(2, 1, AttendanceStatus.PRESENT, 0.1), s(3, 1, AttendanceStatus.PRESENT, 0.2)]

    summary = aggregator.summarize(sessions, date(2024, 1, 1), date(2024, 1, 7))

    assert summary.total_hours != 0.3  # float sum kept as-is internally
    assert summary.to_dict()["totalHours"] == 0.3


def test_sessions_outside_range_are_ignored():
    summary = aggregator.summarize(JANUARY_SESSIONS, date(2024, 1, 8), date(2024, 1, 8))

    assert summary.sessions_count == 2
    assert summary.late_days == 1
    assert summary.absent_days == 0


def test_weekends_without_sessions_are_not_absent():
    summary = aggregator.summarize([], date(2024, 1, 6), date(2024, 1, 7))

    assert summary.absent_days == 0
    assert summary.counted_days == 0


def test_weekend_session_still_counts_its_status():
    summary = aggregator.summarize([s(6, 1, AttendanceStatus.LATE, 3.0)], date(2024, 1, 6), date(2024, 1, 7))

    assert summary.late_days == 1
    assert summary.absent_days == 0


def test_days_after_as_of_are_not_absent():
    summary = aggregator.summarize([], date(2024, 1, 1), date(2024, 1, 31), as_of=date(2024, 1, 10))

    # Mon 1st .. Wed 10th -> 8 working days
    assert summary.absent_days == 8
    assert summary.counted_days == 8


def test_daily_breakdown_includes_empty_days():
    days = aggregator.daily_breakdown(JANUARY_SESSIONS, [date(2024, 1, 8), date(2024, 1, 7)])

    assert days[0].status == AttendanceStatus.LATE
    assert [x.session_number for x in days[0].sessions] == [1, 2]
    assert round(days[0].total_hours, 2) == 7.42
    assert days[1].sessions_count == 0
    assert days[1].status == AttendanceStatus.ABSENT


def test_department_hours_rollup():
    alice = make_user(1, "Alice", department="Engineering")
    bob = make_user(2, "Bob", department="Sales")
    carol = make_user(3, "Carol", department="Support")
    nodept = make_user(4, "Dan", department=None)
    rows = [
        row(s(2, 1, AttendanceStatus.PRESENT, 8.0, user_id=1), alice),
        row(s(3, 1, AttendanceStatus.PRESENT, 1.5, user_id=1), alice),
        row(s(2, 1, AttendanceStatus.LATE, 6.0, user_id=2), bob),
        row(s(2, 1, AttendanceStatus.LATE, 2.0, user_id=4), nodept),
    ]

    totals = aggregator.department_hours(rows, [alice, bob, carol, nodept])

    assert totals == {"Engineering": 9.5, "Sales": 6.0, "Support": 0.0, "Unknown": 2.0}


def test_department_hours_skips_inactive_users_departments():
    ghost = make_user(5, "Ghost", department="Legacy", is_active=False)

    assert aggregator.department_hours([], [ghost]) == {}


def test_team_today_classifies_employees():
    today = date(2024, 1, 10)
    alice = make_user(1, "Alice", department="Engineering")
    bob = make_user(2, "Bob", department="Sales")
    carol = make_user(3, "Carol", department="Engineering")
    boss = make_user(9, "Boss", role=Role.MANAGER)
    sessions = [
        s(10, 1, AttendanceStatus.PRESENT, 3.0, user_id=1),
        s(10, 1, AttendanceStatus.PRESENT, 0.0, user_id=2),
        s(10, 2, AttendanceStatus.LATE, 0.0, user_id=2, open_=True),
        s(10, 1, AttendanceStatus.LATE, 0.0, user_id=9),
    ]

    status = aggregator.team_today([alice, bob, carol, boss], sessions, work_date=today)

    assert status.present == [alice]
    assert status.late == [bob]
    assert status.absent == [carol]
    assert status.total_employees == 3
    assert [a.user for a in status.late_arrivals] == [bob]
    assert status.late_arrivals[0].check_in_time == datetime(2024, 1, 10, 10, 0)


def test_team_today_department_filter():
    alice = make_user(1, "Alice", department="Engineering")
    bob = make_user(2, "Bob", department="Sales")

    status = aggregator.team_today([alice, bob], [], work_date=date(2024, 1, 10), department="Sales")

    assert status.absent == [bob]
    assert status.to_dict()["totalEmployees"] == 1


def test_employee_report_has_entry_per_user():
    alice = make_user(1, "Alice")
    zed = make_user(2, "Zed")
    rows = [row(x, alice) for x in JANUARY_SESSIONS]

    reports = aggregator.employee_report([zed, alice], rows, date(2024, 1, 1), date(2024, 1, 31))

    assert [r.user.full_name for r in reports] == ["Alice", "Zed"]
    assert reports[0].summary.present_days == 2
    assert reports[1].summary.absent_days == 23
    assert reports[1].to_dict()["totalHours"] == 0
