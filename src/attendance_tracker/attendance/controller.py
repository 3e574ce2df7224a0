from __future__ import annotations

from flask import Flask

from ..api import current_user_id, login_required, ok, range_from_request
from ..container import Container
from ..reports.model import round_hours


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @login_required
    def checkin():
        record = service.check_in(current_user_id())
        return ok(record.to_dict())

    @app.route("/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @login_required
    def checkout():
        record = service.check_out(current_user_id())
        return ok(record.to_dict())

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        day = service.today_status(current_user_id())
        latest = day.sessions[-1] if day.sessions else None
        data = {
            "date": day.work_date.isoformat(),
            "status": day.status.value,
            "sessionsCount": day.sessions_count,
            "totalHoursToday": round_hours(day.total_hours),
            "currentSession": latest.to_dict() if latest else None,
            "isCheckedIn": bool(latest and latest.is_open),
            "allSessions": [s.to_dict() for s in day.sessions],
        }
        return ok(data)

    @app.route("/attendance/last-7-days", methods=["GET"], endpoint="attendance_last_7_days")
    @login_required
    def last_7_days():
        return ok([d.to_dict() for d in service.last_days(current_user_id())])

    @app.route("/attendance/my-history", methods=["GET"], endpoint="attendance_my_history")
    @login_required
    def my_history():
        date_range = range_from_request(service.today())
        rows = service.history(current_user_id(), date_range)
        return ok({"range": date_range.to_dict(), "sessions": [r.to_dict() for r in rows]})
