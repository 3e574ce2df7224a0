from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.date_range import DateRange
from ..common.datetime_utils import Clock, now_local
from ..core.constants import RECENT_DAYS_WINDOW
from ..core.exceptions import AlreadyOpenError, NoOpenSessionError, NotFoundError, SessionConflictError
from ..reports.aggregator import daily_breakdown, day_summary
from ..reports.model import DaySummary
from ..users.repository import UserRepository
from .model import AttendanceSession
from .repository import AttendanceRepository
from .status import classify_checkin, session_hours

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out state machine for one (user, day) partition.

    NoSession -> Open -> Closed -> Open -> ... ; a new day starts numbering
    at 1 again. "Today" is the local date of ``now``.
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

    def _require_user(self, user_id: int) -> None:
        if not self._users.get_by_id(user_id):
            raise NotFoundError("Employee not found")

    def check_in(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceSession:
        now = now or self._clock()
        today = now.date()
        self._require_user(user_id)

        if self._attendance.get_open_session(user_id, today):
            logger.info("check-in rejected, session already open: user=%s date=%s", user_id, today)
            raise AlreadyOpenError()

        try:
            session = self._attendance.create_session(
                user_id=user_id,
                work_date=today,
                check_in_time=now,
                status=classify_checkin(now),
            )
        except SessionConflictError:
            # a concurrent check-in won the race
            logger.info("check-in lost race: user=%s date=%s", user_id, today)
            raise AlreadyOpenError()

        logger.info(
            "check-in: user=%s date=%s session=%s status=%s",
            user_id, today, session.session_number, session.status.value,
        )
        return session

    def check_out(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceSession:
        now = now or self._clock()
        today = now.date()

        current = self._attendance.get_open_session(user_id, today)
        if current is None:
            logger.info("check-out rejected, nothing open: user=%s date=%s", user_id, today)
            raise NoOpenSessionError()

        if now < current.check_in_time:
            logger.warning(
                "check-out before check-in (clock skew), clamping to check-in: user=%s session=%s", user_id, current.session_id
            )

        closed = self._attendance.close_session(
            session_id=current.session_id,
            check_out_time=max(now, current.check_in_time),
            total_hours=session_hours(current.check_in_time, now),
        )
        if closed is None:
            # closed by a concurrent request between read and update
            raise NoOpenSessionError()

        logger.info(
            "check-out: user=%s date=%s session=%s hours=%.2f",
            user_id, today, closed.session_number, closed.total_hours,
        )
        return closed

    def today_status(self, user_id: int) -> DaySummary:
        today = self.today()
        sessions = self._attendance.list_for_user(user_id, start_date=today, end_date=today)
        return day_summary(today, sessions)

    def last_days(self, user_id: int, *, days: int = RECENT_DAYS_WINDOW) -> list[DaySummary]:
        """Fixed daily buckets from today back ``days - 1`` days, today first."""
        today = self.today()
        first = today - timedelta(days=days - 1)
        sessions = self._attendance.list_for_user(user_id, start_date=first, end_date=today)
        return daily_breakdown(sessions, (today - timedelta(days=i) for i in range(days)))

    def history(self, user_id: int, date_range: DateRange) -> Sequence[AttendanceSession]:
        return self._attendance.list_for_user(user_id, start_date=date_range.start, end_date=date_range.end)
