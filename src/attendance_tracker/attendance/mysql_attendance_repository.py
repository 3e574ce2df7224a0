from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterator, Optional, Sequence

from ..core.constants import DEFAULT_EXPORT_FETCH_SIZE
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, iter_rows
from .model import AttendanceReportRow, AttendanceSession
from .repository import AttendanceRepository

_SESSION_COLUMNS = """
    a.session_id, a.user_id, a.work_date, a.session_number,
    a.check_in_time, a.check_out_time, a.status, a.total_hours
"""

_REPORT_SELECT = f"""
    SELECT {_SESSION_COLUMNS},
           u.employee_code, u.full_name, u.email, u.department
    FROM attendance_sessions a
    JOIN users u ON u.user_id = a.user_id
"""


def _to_session(r: Dict[str, Any]) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["session_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        session_number=int(r["session_number"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        total_hours=float(r.get("total_hours") or 0),
    )


def _to_report_row(r: Dict[str, Any]) -> AttendanceReportRow:
    return AttendanceReportRow(
        session=_to_session(r),
        employee_code=r.get("employee_code") or "",
        full_name=r.get("full_name") or "",
        email=r.get("email") or "",
        department=r.get("department") or None,
    )


def _report_where(
    start_date: date,
    end_date: date,
    department: Optional[str],
    user_id: Optional[int],
) -> tuple[str, tuple]:
    clauses = ["a.work_date BETWEEN %s AND %s"]
    params: list[object] = [start_date, end_date]
    if department:
        clauses.append("u.department=%s")
        params.append(department)
    if user_id is not None:
        clauses.append("a.user_id=%s")
        params.append(int(user_id))
    return " AND ".join(clauses), tuple(params)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, fetch_size: int = DEFAULT_EXPORT_FETCH_SIZE):
        self._conn_factory = conn_factory
        self._fetch_size = int(fetch_size)

    def get_open_session(self, user_id: int, work_date: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions a
                WHERE a.user_id=%s AND a.work_date=%s AND a.check_out_time IS NULL
                ORDER BY a.session_number DESC
                LIMIT 1
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_for_user(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions a
                WHERE a.user_id=%s AND a.work_date BETWEEN %s AND %s
                ORDER BY a.work_date DESC, a.session_number DESC
                """,
                (int(user_id), start_date, end_date),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM attendance_sessions a
                WHERE a.work_date=%s
                ORDER BY a.user_id ASC, a.session_number ASC
                """,
                (work_date,),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def create_session(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceSession:
        # Number assignment and insert are one statement; the unique keys on
        # (user_id, work_date, session_number) and (user_id, work_date, open_flag)
        # reject a concurrent duplicate with an IntegrityError.
        with db_cursor(self._conn_factory, deadlock_is_conflict=True) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions
                    (user_id, work_date, session_number, check_in_time, status, total_hours)
                SELECT %s, %s, COALESCE(MAX(session_number), 0) + 1, %s, %s, 0
                FROM attendance_sessions
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date, check_in_time, status.value, int(user_id), work_date),
            )
            session_id = int(cur.lastrowid)
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions a WHERE a.session_id=%s",
                (session_id,),
            )
            return _to_session(fetchone(cur))

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        total_hours: float,
    ) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET check_out_time=%s, total_hours=%s
                WHERE session_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, total_hours, int(session_id)),
            )
            if cur.rowcount == 0:
                return None
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM attendance_sessions a WHERE a.session_id=%s",
                (int(session_id),),
            )
            return _to_session(fetchone(cur))

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        where, params = _report_where(start_date, end_date, department, user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REPORT_SELECT} WHERE {where} ORDER BY a.work_date DESC, u.full_name ASC, a.session_number ASC",
                params,
            )
            return [_to_report_row(r) for r in fetchall(cur)]

    def iter_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
    ) -> Iterator[AttendanceReportRow]:
        where, params = _report_where(start_date, end_date, department, None)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_REPORT_SELECT} WHERE {where} ORDER BY a.work_date DESC, u.full_name ASC, a.session_number ASC",
                params,
            )
            for r in iter_rows(cur, batch_size=self._fetch_size):
                yield _to_report_row(r)
