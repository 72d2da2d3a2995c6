from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    current_user,
    hr_required,
    json_body,
    login_required,
    ok,
    parse_date,
    parse_datetime,
    parse_int,
    parse_optional_datetime,
)
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        body = json_body()
        record = svc.check_in(current_user().id, ssid=body.get("ssid"), notes=body.get("notes"))
        return ok(record, message="Checked in successfully", status=201)

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        record = svc.check_out(current_user().id, notes=json_body().get("notes"))
        return ok(record, message="Checked out successfully")

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return ok({"record": svc.get_today_record(current_user().id)})

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        limit = parse_int(request.args.get("limit", DEFAULT_HISTORY_LIMIT), "limit")
        return ok(svc.get_history(current_user().id, limit=limit))

    @app.route("/attendance/summary", methods=["GET"], endpoint="attendance_summary")
    @login_required
    def summary():
        month = parse_int(request.args.get("month"), "month")
        year = parse_int(request.args.get("year"), "year")
        return ok(svc.monthly_summary(user_id=current_user().id, month=month, year=year))

    @app.route("/attendance/week", methods=["GET"], endpoint="attendance_week")
    @login_required
    def week():
        days = svc.current_week_days(current_user().id)
        return ok({"completed_days": len(days), "records": days})

    # HR

    @app.route("/hr/attendance", methods=["GET"], endpoint="hr_attendance_range")
    @hr_required
    def hr_range():
        start = parse_date(request.args.get("start"), "start")
        end = parse_date(request.args.get("end"), "end")
        return ok(svc.get_range(start=start, end=end, user_id=request.args.get("user_id") or None))

    @app.route("/hr/attendance", methods=["POST"], endpoint="hr_attendance_mark")
    @hr_required
    def hr_mark():
        body = json_body()
        user = current_user()
        record = svc.mark_attendance(
            current_role=user.role,
            marked_by=user.id,
            user_id=str(body.get("user_id") or ""),
            work_date=parse_date(body.get("date"), "date"),
            check_in_time=parse_datetime(body.get("check_in_time"), "check_in_time"),
            check_out_time=parse_optional_datetime(body.get("check_out_time"), "check_out_time"),
            notes=body.get("notes"),
        )
        return ok(record, message="Attendance marked", status=201)

    @app.route("/hr/attendance/<record_id>", methods=["PATCH"], endpoint="hr_attendance_update")
    @hr_required
    def hr_update(record_id: str):
        body = json_body()
        record = svc.update_record(
            current_role=current_user().role,
            record_id=record_id,
            check_in_time=parse_optional_datetime(body.get("check_in_time"), "check_in_time"),
            check_out_time=parse_optional_datetime(body.get("check_out_time"), "check_out_time"),
            notes=body.get("notes"),
        )
        return ok(record, message="Attendance updated")

    @app.route("/hr/attendance/<record_id>", methods=["DELETE"], endpoint="hr_attendance_delete")
    @hr_required
    def hr_delete(record_id: str):
        svc.delete_record(current_role=current_user().role, record_id=record_id)
        return ok(message="Attendance deleted")

    @app.route("/hr/attendance/roster", methods=["GET"], endpoint="hr_attendance_roster")
    @hr_required
    def hr_roster():
        raw = request.args.get("date")
        work_date = parse_date(raw) if raw else svc.today()
        return ok(svc.daily_roster(work_date=work_date))

    @app.route("/hr/attendance/stats", methods=["GET"], endpoint="hr_attendance_stats")
    @hr_required
    def hr_stats():
        start = parse_date(request.args.get("start"), "start")
        end = parse_date(request.args.get("end"), "end")
        return ok(svc.range_stats(start=start, end=end))

    @app.route("/hr/attendance/week", methods=["GET"], endpoint="hr_attendance_week")
    @hr_required
    def hr_week():
        return ok(svc.current_week_counts())
