"""Period / explicit-bounds resolution shared by history, summary and export."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..core.enums import Period
from ..core.exceptions import InvalidRangeError
from .datetime_utils import parse_iso_date

DateLike = Union[date, str]


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range ``[start, end]``."""

    start: date
    end: date

    def to_dict(self) -> dict:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


def week_bounds(today: date) -> DateRange:
    monday = today - timedelta(days=today.weekday())
    return DateRange(monday, monday + timedelta(days=6))


def month_bounds(today: date) -> DateRange:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return DateRange(today.replace(day=1), today.replace(day=last_day))


def _coerce(value: DateLike, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except (TypeError, ValueError) as exc:
        raise InvalidRangeError(f"Invalid {field_name} date: {value!r}") from exc


def resolve_range(
    period: Optional[str] = None,
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    *,
    today: date,
) -> DateRange:
    """Turn a period selector or explicit bounds into a concrete range.

    Explicit ``start`` and ``end`` win over ``period`` and are used verbatim.
    With neither, the current month is used. Weeks start on Monday.
    """
    has_start = start not in (None, "")
    has_end = end not in (None, "")

    if has_start or has_end:
        if not (has_start and has_end):
            raise InvalidRangeError("Both start and end are required for a custom range")
        lo = _coerce(start, "start")
        hi = _coerce(end, "end")
        if lo > hi:
            raise InvalidRangeError("start must not be after end")
        return DateRange(lo, hi)

    if not period:
        return month_bounds(today)

    try:
        selected = Period(str(period).strip().lower())
    except ValueError as exc:
        raise InvalidRangeError(f"Unknown period: {period!r}") from exc

    if selected is Period.DAILY:
        return DateRange(today, today)
    if selected is Period.WEEKLY:
        return week_bounds(today)
    return month_bounds(today)
