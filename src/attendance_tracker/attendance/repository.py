from __future__ import annotations

from datetime import date, datetime
from typing import Iterator, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceReportRow, AttendanceSession


class AttendanceRepository(Protocol):
    """Session store contract.

    Implementations own the per-(user, date) invariants: ``create_session``
    must assign ``max(session_number) + 1`` and refuse a second open
    session atomically (raising ``SessionConflictError``); ``close_session``
    must only touch a row that is still open.
    """

    def get_open_session(self, user_id: int, work_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceSession]:
        """Sessions ordered by work_date DESC, session_number DESC."""
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def create_session(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> AttendanceSession:
        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        total_hours: float,
    ) -> Optional[AttendanceSession]:
        """Return the closed session, or None if it was no longer open."""
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def iter_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        department: Optional[str] = None,
    ) -> Iterator[AttendanceReportRow]:
        """Stream report rows in work_date DESC order without loading them all."""
        raise NotImplementedError
