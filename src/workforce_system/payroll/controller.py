from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..common.web import (
    current_user,
    hr_required,
    json_body,
    login_required,
    ok,
    parse_date,
    parse_float,
    parse_int,
    parse_optional_date,
)
from ..container import Container
from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import SalaryStatus
from ..core.exceptions import AuthorizationError, ValidationError

REPORT_FIELDS = [
    "work_date",
    "user_id",
    "employee_id",
    "full_name",
    "department",
    "check_in",
    "check_out",
    "break_minutes",
    "worked_hours",
    "note",
]

SHEET_FIELDS = [
    "serial_no",
    "name",
    "account_number",
    "ifsc_code",
    "amount",
    "aadhaar_number",
    "date_of_birth",
]


def register(app: Flask, container: Container) -> None:
    def _write_csv(*, rows, fieldnames, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _month_args():
        month = parse_int(request.args.get("month"), "month")
        year = parse_int(request.args.get("year"), "year")
        return month, year

    def _status(value):
        try:
            return SalaryStatus(value)
        except ValueError:
            raise ValidationError("Invalid salary status")

    def _own_or_hr(user_id: str) -> None:
        user = current_user()
        if user.id != user_id and not user.role.is_reviewer:
            raise AuthorizationError("You can only view your own payroll data")

    # Attendance report

    @app.route("/hr/reports/attendance", methods=["GET"], endpoint="attendance_report")
    @hr_required
    def attendance_report():
        start = parse_date(request.args.get("start"), "start")
        end = parse_date(request.args.get("end"), "end")
        data = container.payroll_report_service.build_attendance_report(
            start=start,
            end=end,
            user_id=request.args.get("user_id") or None,
        )
        if request.args.get("format") == "csv":
            return _write_csv(rows=data.rows, fieldnames=REPORT_FIELDS, filename=f"attendance_{start}_{end}.csv")
        return ok({"rows": data.rows, "summary": data.summary})

    @app.route("/me/reports/attendance", methods=["GET"], endpoint="my_attendance_report")
    @login_required
    def my_attendance_report():
        start = parse_date(request.args.get("start"), "start")
        end = parse_date(request.args.get("end"), "end")
        data = container.payroll_report_service.build_attendance_report(
            start=start,
            end=end,
            user_id=current_user().id,
        )
        return _write_csv(rows=data.rows, fieldnames=REPORT_FIELDS, filename=f"my_attendance_{start}_{end}.csv")

    # Salary records

    @app.route("/salary", methods=["GET"], endpoint="my_salary")
    @login_required
    def my_salary():
        svc = container.salary_service
        user_id = current_user().id
        return ok({"latest": svc.latest_for_user(user_id), "records": svc.list_for_user(user_id)})

    @app.route("/hr/salary", methods=["GET"], endpoint="hr_salary_list")
    @hr_required
    def hr_salary_list():
        month = request.args.get("month")
        year = request.args.get("year")
        status = request.args.get("status")
        return ok(
            container.salary_service.list_records(
                month=parse_int(month, "month") if month else None,
                year=parse_int(year, "year") if year else None,
                status=_status(status) if status else None,
                user_id=request.args.get("user_id") or None,
            )
        )

    @app.route("/hr/salary/pending", methods=["GET"], endpoint="hr_salary_pending")
    @hr_required
    def hr_salary_pending():
        return ok(container.salary_service.list_pending())

    @app.route("/hr/salary/stats", methods=["GET"], endpoint="hr_salary_stats")
    @hr_required
    def hr_salary_stats():
        month, year = _month_args()
        return ok(container.salary_service.stats(month=month, year=year))

    @app.route("/hr/salary", methods=["POST"], endpoint="hr_salary_create")
    @hr_required
    def hr_salary_create():
        body = json_body()
        user = current_user()
        record = container.salary_service.create_record(
            current_role=user.role,
            created_by=user.id,
            user_id=str(body.get("user_id") or ""),
            month=parse_int(body.get("month"), "month"),
            year=parse_int(body.get("year"), "year"),
            base_salary=parse_float(body.get("base_salary"), "base_salary"),
            working_days=parse_int(body.get("working_days"), "working_days"),
            present_days=parse_int(body.get("present_days"), "present_days"),
            allowances=parse_float(body.get("allowances"), "allowances", 0.0),
            deductions=parse_float(body.get("deductions"), "deductions", 0.0),
            bonus=parse_float(body.get("bonus"), "bonus", 0.0),
            leaves_taken=parse_int(body.get("leaves_taken") or 0, "leaves_taken"),
            notes=body.get("notes"),
        )
        return ok(record, message="Salary record created", status=201)

    @app.route("/hr/salary/<record_id>", methods=["PATCH"], endpoint="hr_salary_update")
    @hr_required
    def hr_salary_update(record_id: str):
        record = container.salary_service.update_record(
            current_role=current_user().role,
            record_id=record_id,
            updates=json_body(),
        )
        return ok(record, message="Salary record updated")

    @app.route("/hr/salary/<record_id>/status", methods=["POST"], endpoint="hr_salary_status")
    @hr_required
    def hr_salary_status(record_id: str):
        body = json_body()
        user = current_user()
        record = container.salary_service.change_status(
            current_role=user.role,
            record_id=record_id,
            status=_status(body.get("status")),
            approved_by=user.id,
            payment_method=body.get("payment_method"),
            today=container.attendance_service.today(),
        )
        return ok(record, message=f"Salary marked {record.status.value}")

    @app.route("/hr/salary/<record_id>", methods=["DELETE"], endpoint="hr_salary_delete")
    @hr_required
    def hr_salary_delete(record_id: str):
        container.salary_service.delete_record(current_role=current_user().role, record_id=record_id)
        return ok(message="Salary record deleted")

    # Earnings and slips

    @app.route("/earnings/<user_id>", methods=["GET"], endpoint="earnings_history")
    @login_required
    def earnings_history(user_id: str):
        _own_or_hr(user_id)
        return ok(container.earnings_service.history(user_id))

    @app.route("/earnings/<user_id>/month", methods=["GET"], endpoint="earnings_month")
    @login_required
    def earnings_month(user_id: str):
        _own_or_hr(user_id)
        month, year = _month_args()
        return ok({"earnings": container.earnings_service.for_month(user_id, month=month, year=year)})

    @app.route("/earnings/<user_id>/slips", methods=["GET"], endpoint="slip_months")
    @login_required
    def slip_months(user_id: str):
        _own_or_hr(user_id)
        months = container.earnings_service.available_slip_months(
            user_id,
            today=container.attendance_service.today(),
        )
        return ok([{"month": m, "year": y} for m, y in months])

    @app.route("/earnings/<user_id>/slip", methods=["GET"], endpoint="salary_slip")
    @login_required
    def salary_slip(user_id: str):
        _own_or_hr(user_id)
        month, year = _month_args()
        return ok(container.salary_slip_service.build_slip(user_id, month=month, year=year))

    @app.route("/hr/earnings", methods=["GET"], endpoint="hr_earnings")
    @hr_required
    def hr_earnings():
        month, year = _month_args()
        svc = container.earnings_service
        return ok({"earnings": svc.all_for_month(month=month, year=year), "stats": svc.month_stats(month=month, year=year)})

    @app.route("/hr/earnings/sheet", methods=["GET"], endpoint="bulk_salary_sheet")
    @hr_required
    def bulk_salary_sheet():
        month, year = _month_args()
        svc = container.bulk_salary_service
        rows = svc.build_sheet(month=month, year=year)
        if request.args.get("format") == "csv":
            return _write_csv(
                rows=[
                    {
                        "serial_no": r.serial_no,
                        "name": r.name,
                        "account_number": r.account_number,
                        "ifsc_code": r.ifsc_code,
                        "amount": f"{r.amount:.2f}",
                        "aadhaar_number": r.aadhaar_number,
                        "date_of_birth": r.date_of_birth.isoformat() if r.date_of_birth else "N/A",
                    }
                    for r in rows
                ],
                fieldnames=SHEET_FIELDS,
                filename=f"salary_sheet_{year}_{month:02d}.csv",
            )
        return ok({"rows": rows, "total_amount": svc.total_amount(rows)})

    # Salary changes

    @app.route("/hr/salary-changes", methods=["GET"], endpoint="hr_salary_changes")
    @hr_required
    def hr_salary_changes():
        user_id = request.args.get("user_id")
        svc = container.salary_change_service
        if user_id:
            return ok(svc.history(user_id))
        return ok(
            svc.list_changes(
                from_date=parse_optional_date(request.args.get("from"), "from"),
                to_date=parse_optional_date(request.args.get("to"), "to"),
            )
        )

    @app.route("/hr/salary-changes", methods=["POST"], endpoint="hr_schedule_salary_change")
    @hr_required
    def hr_schedule_salary_change():
        body = json_body()
        user = current_user()
        result = container.salary_change_service.schedule_change(
            current_role=user.role,
            changed_by=user.id,
            user_id=str(body.get("user_id") or ""),
            new_base_salary=parse_float(body.get("new_base_salary"), "new_base_salary"),
            working_days=body.get("working_days") or [],
            daily_hours=parse_float(body.get("daily_hours"), "daily_hours", float(DEFAULT_DAILY_HOURS)),
            change_reason=body.get("change_reason"),
            notes=body.get("notes"),
            effective_from=parse_optional_date(body.get("effective_from"), "effective_from"),
        )
        return ok(result, message="Salary change scheduled", status=201)

    @app.route("/hr/salary-changes/apply", methods=["POST"], endpoint="hr_apply_salary_changes")
    @hr_required
    def hr_apply_salary_changes():
        return ok(container.salary_change_service.apply_pending(), message="Pending salary changes applied")

    @app.route("/hr/salary-changes/<change_id>", methods=["PATCH"], endpoint="hr_salary_change_notes")
    @hr_required
    def hr_salary_change_notes(change_id: str):
        change = container.salary_change_service.update_notes(
            current_role=current_user().role,
            change_id=change_id,
            notes=json_body().get("notes"),
        )
        return ok(change, message="Notes updated")

    @app.route("/hr/salary-changes/<change_id>", methods=["DELETE"], endpoint="hr_salary_change_delete")
    @hr_required
    def hr_salary_change_delete(change_id: str):
        container.salary_change_service.delete_change(current_role=current_user().role, change_id=change_id)
        return ok(message="Salary change deleted")
