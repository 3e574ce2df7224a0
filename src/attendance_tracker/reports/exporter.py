from __future__ import annotations

import csv
import io
import logging
from itertools import chain
from typing import Iterable, Iterator, Sequence

from ..attendance.model import AttendanceReportRow
from ..common.datetime_utils import to_iso_timestamp
from .model import round_hours

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "date",
    "employeeId",
    "name",
    "email",
    "department",
    "checkInTime",
    "checkOutTime",
    "status",
    "totalHours",
)


def csv_line(values: Sequence[object]) -> str:
    """Render one CSV record with every field quoted."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow(["" if v is None else v for v in values])
    return out.getvalue()


def to_csv_fields(row: AttendanceReportRow) -> list[str]:
    s = row.session
    return [
        s.work_date.isoformat(),
        row.employee_code,
        row.full_name,
        row.email,
        row.department or "",
        to_iso_timestamp(s.check_in_time),
        to_iso_timestamp(s.check_out_time),
        s.status.value,
        f"{round_hours(s.total_hours):.2f}",
    ]


def iter_csv(rows: Iterable[AttendanceReportRow]) -> Iterator[str]:
    """Yield the header then one line per session, in the order received.

    A failure after the first line has gone out cannot be reported to the
    client any more: it is logged and the stream simply ends.
    """
    yield csv_line(CSV_COLUMNS)
    written = 0
    try:
        for row in rows:
            yield csv_line(to_csv_fields(row))
            written += 1
    except Exception:
        logger.exception("CSV export aborted after %d rows", written)
        return
    logger.info("CSV export finished: %d rows", written)


def open_csv_stream(rows: Iterable[AttendanceReportRow]) -> Iterator[str]:
    """Start the row source before anything is sent.

    Errors raised while opening the query (store down, bad filter) still
    propagate to the caller, so they can become a normal error response.
    """
    source = iter(rows)
    try:
        first = next(source)
    except StopIteration:
        return iter_csv(())
    return iter_csv(chain((first,), source))
