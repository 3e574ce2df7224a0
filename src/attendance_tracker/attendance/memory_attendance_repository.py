from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Iterator, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import SessionConflictError
from ..users.repository import UserRepository
from .model import AttendanceReportRow, AttendanceSession
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    """Process-local session store.

    A single lock makes "check for an open session, then insert" atomic,
    which is what the MySQL unique keys guarantee for the other backend.
    """

    def __init__(self, users: UserRepository):
        self._users = users
        self._lock = threading.Lock()
        self._sessions: dict[int, AttendanceSession] = {}
        self._next_id = 0

    def _snapshot(self) -> list[AttendanceSession]:
        with self._lock:
            return list(self._sessions.values())

    def _partition(self, user_id: int, work_date: date) -> list[AttendanceSession]:
        # caller holds the lock
        return [s for s in self._sessions.values() if s.user_id == user_id and s.work_date == work_date]

    def get_open_session(self, user_id: int, work_date: date) -> Optional[AttendanceSession]:
        open_ = [s for s in self._snapshot() if s.user_id == user_id and s.work_date == work_date and s.is_open]
        return max(open_, key=lambda s: s.session_number) if open_ else None

    def list_for_user(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceSession]:
        rows = [s for s in self._snapshot() if s.user_id == user_id and start_date <= s.work_date <= end_date]
        rows.sort(key=lambda s: (s.work_date, s.session_number), reverse=True)
        return rows

    def list_for_date(self, work_date: date) -> Sequence[AttendanceSession]:
        rows = [s for s in self._snapshot() if s.work_date == work_date]
        rows.sort(key=lambda s: (s.user_id, s.session_number))
        return rows

    def create_session(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceSession:
        with self._lock:
            partition = self._partition(user_id, work_date)
            if any(s.is_open for s in partition):
                raise SessionConflictError(f"open session exists for user {user_id} on {work_date}")

            self._next_id += 1
            session = AttendanceSession(
                session_id=self._next_id,
                user_id=user_id,
                work_date=work_date,
                session_number=max((s.session_number for s in partition), default=0) + 1,
                check_in_time=check_in_time,
                check_out_time=None,
                status=status,
                total_hours=0.0,
            )
            self._sessions[session.session_id] = session
            return session

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        total_hours: float,
    ) -> Optional[AttendanceSession]:
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None or not current.is_open:
                return None
            closed = current.closed(check_out_time=check_out_time, total_hours=total_hours)
            self._sessions[session_id] = closed
            return closed

    def _join(self, session: AttendanceSession) -> Optional[AttendanceReportRow]:
        user = self._users.get_by_id(session.user_id)
        if user is None:
            return None
        return AttendanceReportRow(
            session=session,
            employee_code=user.employee_code,
            full_name=user.full_name,
            email=user.email,
            department=user.department,
        )

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        rows: list[AttendanceReportRow] = []
        for session in self._snapshot():
            if not (start_date <= session.work_date <= end_date):
                continue
            if user_id is not None and session.user_id != user_id:
                continue
            row = self._join(session)
            if row is None or (department and row.department != department):
                continue
            rows.append(row)

        # work_date DESC, then name/session ASC, same as the SQL ORDER BY
        rows.sort(key=lambda r: (r.full_name, r.session.session_number))
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows

    def iter_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
    ) -> Iterator[AttendanceReportRow]:
        yield from self.get_report_rows(start_date=start_date, end_date=end_date, department=department)
