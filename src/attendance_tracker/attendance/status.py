"""Status and hours rules, shared by the state machine and the aggregator."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import HOURS_PRECISION, LATE_CUTOFF_HOUR
from ..core.enums import AttendanceStatus
from .model import AttendanceSession


def classify_checkin(check_in_time: datetime) -> AttendanceStatus:
    """``late`` from LATE_CUTOFF_HOUR:00:00 local time onwards, else ``present``.

    ``half-day`` and ``absent`` are never produced here.
    """
    if check_in_time.hour >= LATE_CUTOFF_HOUR:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def session_hours(check_in_time: datetime, check_out_time: datetime) -> float:
    """Elapsed hours, rounded to 2 decimals and never negative."""
    hours = (check_out_time - check_in_time).total_seconds() / 3600
    return max(0.0, round(hours, HOURS_PRECISION))


def last_session(sessions: Sequence[AttendanceSession]) -> Optional[AttendanceSession]:
    if not sessions:
        return None
    return max(sessions, key=lambda s: (s.session_number, s.check_in_time))


def representative_status(sessions: Sequence[AttendanceSession]) -> AttendanceStatus:
    """Status of the chronologically last session of a day; ``absent`` if none."""
    latest = last_session(sessions)
    return latest.status if latest else AttendanceStatus.ABSENT
