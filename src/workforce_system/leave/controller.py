from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    current_user,
    hr_required,
    json_body,
    login_required,
    ok,
    parse_date,
    parse_int,
    parse_optional_date,
)
from ..container import Container
from ..core.enums import LeaveStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    svc = container.leave_service

    def _leave_fields(body: dict) -> dict:
        return {
            "leave_type": body.get("leave_type"),
            "start_date": parse_date(body.get("start_date"), "start_date"),
            "end_date": parse_date(body.get("end_date"), "end_date"),
            "reason": body.get("reason") or "",
        }

    @app.route("/leave", methods=["GET"], endpoint="my_leave")
    @login_required
    def my_leave():
        return ok(svc.list_for_user(current_user().id))

    @app.route("/leave", methods=["POST"], endpoint="create_leave")
    @login_required
    def create_leave():
        req = svc.create_leave(user_id=current_user().id, **_leave_fields(json_body()))
        return ok(req, message="Leave request submitted", status=201)

    @app.route("/leave/<request_id>", methods=["PUT"], endpoint="update_leave")
    @login_required
    def update_leave(request_id: str):
        req = svc.update_leave(user_id=current_user().id, request_id=request_id, **_leave_fields(json_body()))
        return ok(req, message="Leave request updated")

    @app.route("/leave/<request_id>/cancel", methods=["POST"], endpoint="cancel_leave")
    @login_required
    def cancel_leave(request_id: str):
        return ok(svc.cancel_leave(user_id=current_user().id, request_id=request_id), message="Leave request cancelled")

    @app.route("/leave/<request_id>", methods=["DELETE"], endpoint="delete_leave")
    @login_required
    def delete_leave(request_id: str):
        user = current_user()
        svc.delete_leave(current_user_id=user.id, current_role=user.role, request_id=request_id)
        return ok(message="Leave request deleted")

    @app.route("/leave/upcoming", methods=["GET"], endpoint="upcoming_leave")
    @login_required
    def upcoming_leave():
        return ok(svc.upcoming(current_user().id, today=container.attendance_service.today()))

    @app.route("/leave/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    def leave_balance():
        year = request.args.get("year")
        year = parse_int(year, "year") if year else container.attendance_service.today().year
        balances = svc.balance(current_user().id, year=year)
        return ok(
            [
                {"leave_type": b.leave_type, "used": b.used, "total": b.total, "remaining": b.remaining}
                for b in balances.values()
            ]
        )

    # HR

    @app.route("/hr/leave", methods=["GET"], endpoint="hr_leave")
    @hr_required
    def hr_leave():
        raw_status = request.args.get("status")
        try:
            status = LeaveStatus(raw_status) if raw_status else None
        except ValueError:
            raise ValidationError("Invalid status")
        return ok(
            svc.list_all(
                status=status,
                user_id=request.args.get("user_id") or None,
                start_date=parse_optional_date(request.args.get("start"), "start"),
                end_date=parse_optional_date(request.args.get("end"), "end"),
            )
        )

    @app.route("/hr/leave/pending", methods=["GET"], endpoint="hr_leave_pending")
    @hr_required
    def hr_leave_pending():
        return ok(svc.list_pending())

    @app.route("/hr/leave/<request_id>/review", methods=["POST"], endpoint="hr_review_leave")
    @hr_required
    def hr_review_leave(request_id: str):
        body = json_body()
        user = current_user()
        try:
            status = LeaveStatus(body.get("status"))
        except ValueError:
            raise ValidationError("Invalid status")
        req = svc.review_leave(
            current_role=user.role,
            reviewer_id=user.id,
            request_id=request_id,
            status=status,
            reviewer_notes=body.get("reviewer_notes"),
        )
        return ok(req, message=f"Leave request {status.value}")

    @app.route("/hr/leave/stats", methods=["GET"], endpoint="hr_leave_stats")
    @hr_required
    def hr_leave_stats():
        start = parse_date(request.args.get("start"), "start")
        end = parse_date(request.args.get("end"), "end")
        return ok(svc.stats(start_date=start, end_date=end))
