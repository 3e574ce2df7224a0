from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Iterator

from ..core.constants import DATE_FORMAT

Clock = Callable[[], datetime]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    A full ISO timestamp is accepted too; only its date part is kept.
    """
    value = value.strip()
    if len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return datetime.strptime(value, DATE_FORMAT).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in ``[start, end]``."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def is_working_day(day: date) -> bool:
    return day.weekday() < 5


def to_iso_timestamp(value: datetime | None) -> str:
    """Serialize a timestamp as ISO-8601 with an explicit offset.

    Naive values are taken as server local time.
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()
