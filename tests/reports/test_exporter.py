from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from attendance_tracker.attendance.model import AttendanceReportRow, AttendanceSession
from attendance_tracker.core.enums import AttendanceStatus
from attendance_tracker.core.exceptions import StoreUnavailableError
from attendance_tracker.reports.exporter import CSV_COLUMNS, csv_line, iter_csv, open_csv_stream

UTC = timezone.utc
HEADER = '"date","employeeId","name","email","department","checkInTime","checkOutTime","status","totalHours"\r\n'


def _row(day: int, name: str = "Alice", *, check_out: bool = True, hours: float = 8.0) -> AttendanceReportRow:
    check_in = datetime(2024, 1, day, 9, 5, tzinfo=UTC)
    return AttendanceReportRow(
        session=AttendanceSession(
            session_id=day,
            user_id=1,
            work_date=date(2024, 1, day),
            session_number=1,
            check_in_time=check_in,
            check_out_time=check_in + timedelta(hours=hours) if check_out else None,
            status=AttendanceStatus.LATE,
            total_hours=hours if check_out else 0.0,
        ),
        employee_code="EMP001",
        full_name=name,
        email="alice@example.com",
        department="Engineering",
    )


def test_header_has_fixed_column_order():
    assert next(iter_csv([])) == HEADER
    assert CSV_COLUMNS[0] == "date" and CSV_COLUMNS[-1] == "totalHours"


def test_embedded_quotes_are_doubled():
    assert csv_line(['O"Brien']) == '"O""Brien"\r\n'


def test_row_fields_are_quoted_and_timestamps_carry_offset():
    lines = list(iter_csv([_row(10, 'O"Brien', hours=2.92)]))

    assert lines[1] == (
        '"2024-01-10","EMP001","O""Brien","alice@example.com","Engineering",'
        '"2024-01-10T09:05:00+00:00","2024-01-10T12:00:12+00:00","late","2.92"\r\n'
    )


def test_missing_checkout_renders_empty_field():
    line = list(iter_csv([_row(10, check_out=False)]))[1]

    assert ',"","late","0.00"' in line


def test_rows_keep_source_order():
    rows = [_row(12), _row(11), _row(10)]

    lines = list(iter_csv(rows))[1:]

    assert [ln[1:11] for ln in lines] == ["2024-01-12", "2024-01-11", "2024-01-10"]


def test_rows_are_pulled_lazily():
    pulled: list[int] = []

    def source():
        for day in (12, 11):
            pulled.append(day)
            yield _row(day)

    stream = iter_csv(source())
    next(stream)  # header
    assert pulled == []
    next(stream)
    assert pulled == [12]


def test_mid_stream_failure_is_logged_and_ends_stream(caplog):
    def source():
        yield _row(12)
        raise StoreUnavailableError()

    with caplog.at_level(logging.ERROR, logger="attendance_tracker"):
        lines = list(iter_csv(source()))

    assert len(lines) == 2
    assert "CSV export aborted after 1 rows" in caplog.text


def test_open_stream_surfaces_failures_before_first_byte():
    def source():
        raise StoreUnavailableError()
        yield  # pragma: no cover

    with pytest.raises(StoreUnavailableError):
        open_csv_stream(source())


def test_open_stream_with_no_rows_yields_header_only():
    assert list(open_csv_stream(iter([]))) == [HEADER]
