from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, hr_required, json_body, login_required, ok, parse_datetime
from ..container import Container
from ..core.enums import BreakStatus
from ..core.exceptions import ValidationError
from .model import TimeWindow


def register(app: Flask, container: Container) -> None:
    svc = container.break_service

    def _window(body: dict, record_id: str) -> TimeWindow:
        """ISO ``start_time``/``end_time``, or ``start``/``end`` as HH:MM on the record's day."""
        if body.get("start_time") or body.get("end_time"):
            return TimeWindow(
                start=parse_datetime(body.get("start_time"), "start_time"),
                end=parse_datetime(body.get("end_time"), "end_time"),
            )
        if not body.get("start") or not body.get("end"):
            raise ValidationError("Break start and end are required")
        return svc.clock_window(record_id, body["start"], body["end"])

    def _status_arg():
        raw = request.args.get("status")
        if not raw:
            return None
        try:
            return BreakStatus(raw)
        except ValueError:
            raise ValidationError("Invalid status")

    @app.route("/breaks", methods=["GET"], endpoint="my_breaks")
    @login_required
    def my_breaks():
        return ok(svc.list_for_user(current_user().id, status=_status_arg()))

    @app.route("/breaks", methods=["POST"], endpoint="create_break")
    @login_required
    def create_break():
        body = json_body()
        record_id = str(body.get("attendance_record_id") or "")
        window = _window(body, record_id)
        req = svc.create_request(
            user_id=current_user().id,
            attendance_record_id=record_id,
            start=window.start,
            end=window.end,
            reason=body.get("reason") or "",
        )
        return ok(req, message="Break request submitted", status=201)

    @app.route("/breaks/<request_id>/cancel", methods=["POST"], endpoint="cancel_break")
    @login_required
    def cancel_break(request_id: str):
        return ok(svc.cancel_request(user_id=current_user().id, request_id=request_id), message="Break request cancelled")

    @app.route("/breaks/<request_id>", methods=["DELETE"], endpoint="delete_break")
    @login_required
    def delete_break(request_id: str):
        user = current_user()
        svc.delete_request(current_user_id=user.id, current_role=user.role, request_id=request_id)
        return ok(message="Break request deleted")

    @app.route("/attendance/<record_id>/breaks", methods=["GET"], endpoint="record_breaks")
    @login_required
    def record_breaks(record_id: str):
        user = current_user()
        return ok(svc.list_for_record(record_id, current_user_id=user.id, current_role=user.role))

    # HR

    @app.route("/hr/breaks/pending", methods=["GET"], endpoint="pending_breaks")
    @hr_required
    def pending_breaks():
        return ok(svc.list_pending())

    @app.route("/hr/breaks/<request_id>/approve", methods=["POST"], endpoint="approve_break")
    @hr_required
    def approve_break(request_id: str):
        body = json_body()
        user = current_user()
        start = body.get("approved_start_time")
        end = body.get("approved_end_time")
        req = svc.approve_request(
            current_role=user.role,
            reviewer_id=user.id,
            request_id=request_id,
            approved_start=parse_datetime(start, "approved_start_time") if start else None,
            approved_end=parse_datetime(end, "approved_end_time") if end else None,
            reviewer_notes=body.get("reviewer_notes"),
        )
        return ok(req, message="Break approved")

    @app.route("/hr/breaks/<request_id>/reject", methods=["POST"], endpoint="reject_break")
    @hr_required
    def reject_break(request_id: str):
        user = current_user()
        req = svc.reject_request(
            current_role=user.role,
            reviewer_id=user.id,
            request_id=request_id,
            reviewer_notes=json_body().get("reviewer_notes"),
        )
        return ok(req, message="Break rejected")

    @app.route("/hr/breaks/<request_id>", methods=["PATCH"], endpoint="update_break")
    @hr_required
    def update_break(request_id: str):
        body = json_body()
        user = current_user()
        window = TimeWindow(
            start=parse_datetime(body.get("start_time"), "start_time"),
            end=parse_datetime(body.get("end_time"), "end_time"),
        )
        req = svc.update_approved_break(
            current_role=user.role,
            reviewer_id=user.id,
            request_id=request_id,
            start=window.start,
            end=window.end,
            notes=body.get("notes"),
        )
        return ok(req, message="Break updated")

    @app.route("/hr/attendance/<record_id>/breaks", methods=["POST"], endpoint="assign_break")
    @hr_required
    def assign_break(record_id: str):
        body = json_body()
        user = current_user()
        window = _window(body, record_id)
        req = svc.assign_break(
            current_role=user.role,
            assigned_by=user.id,
            attendance_record_id=record_id,
            start=window.start,
            end=window.end,
            notes=body.get("notes"),
        )
        return ok(req, message="Break assigned", status=201)

    @app.route("/hr/breaks/expire", methods=["POST"], endpoint="expire_breaks")
    @hr_required
    def expire_breaks():
        count = svc.expire_pending()
        return ok({"rejected": count}, message=f"{count} expired request(s) rejected")
