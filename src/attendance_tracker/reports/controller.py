from __future__ import annotations

from flask import Flask, Response, stream_with_context

from ..api import (
    current_user_id,
    department_from_request,
    login_required,
    manager_required,
    ok,
    range_from_request,
)
from ..container import Container
from .exporter import open_csv_stream


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    @app.route("/attendance/my-summary", methods=["GET"], endpoint="attendance_my_summary")
    @login_required
    def my_summary():
        date_range = range_from_request(reports.today())
        return ok(reports.summary_for_user(current_user_id(), date_range).to_dict())

    # ===== MANAGER ENDPOINTS =====

    @app.route("/attendance/all", methods=["GET"], endpoint="attendance_all")
    @manager_required
    def all_attendances():
        date_range = range_from_request(reports.today())
        department = department_from_request()
        rows = reports.team_rows(date_range, department=department)
        return ok(
            {
                "range": date_range.to_dict(),
                "department": department,
                "sessions": [r.to_dict() for r in rows],
            }
        )

    @app.route("/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_employee")
    @manager_required
    def employee_attendances(employee_id: int):
        date_range = range_from_request(reports.today())
        user, sessions, summary = reports.employee_detail(employee_id, date_range)
        return ok(
            {
                "employee": user.to_public_dict(),
                "range": date_range.to_dict(),
                "sessions": [s.to_dict() for s in sessions],
                "summary": summary.to_dict(),
            }
        )

    @app.route("/attendance/summary", methods=["GET"], endpoint="attendance_team_summary")
    @manager_required
    def team_summary():
        date_range = range_from_request(reports.today())
        return ok(reports.team_summary(date_range, department=department_from_request()).to_dict())

    @app.route("/attendance/today-status", methods=["GET"], endpoint="attendance_today_status")
    @manager_required
    def today_status():
        return ok(reports.team_today(department=department_from_request()).to_dict())

    @app.route("/attendance/report", methods=["GET"], endpoint="attendance_report")
    @manager_required
    def employee_report():
        date_range = range_from_request(reports.today())
        items = reports.employee_reports(date_range, department=department_from_request())
        return ok({"range": date_range.to_dict(), "employees": [r.to_dict() for r in items]})

    @app.route("/attendance/export", methods=["GET"], endpoint="attendance_export")
    @manager_required
    def export_csv():
        date_range = range_from_request(reports.today())
        stream = open_csv_stream(reports.export_rows(date_range, department=department_from_request()))

        filename = f"attendance_{date_range.start.strftime('%Y%m%d')}_{date_range.end.strftime('%Y%m%d')}.csv"
        return Response(
            stream_with_context(stream),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    # ===== DASHBOARD =====

    @app.route("/dashboard/employee", methods=["GET"], endpoint="dashboard_employee")
    @login_required
    def employee_dashboard():
        return ok(reports.employee_dashboard(current_user_id()).to_dict())

    @app.route("/dashboard/manager", methods=["GET"], endpoint="dashboard_manager")
    @manager_required
    def manager_dashboard():
        return ok(reports.manager_dashboard())
