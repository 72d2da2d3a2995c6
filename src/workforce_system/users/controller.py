from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, hr_required, json_body, login_required, ok, parse_optional_date
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    svc = container.employee_service

    @app.route("/me", methods=["GET"], endpoint="my_profile")
    @login_required
    def my_profile():
        return ok(svc.get(current_user().id))

    @app.route("/me", methods=["PATCH"], endpoint="update_my_profile")
    @login_required
    def update_my_profile():
        return ok(svc.update_profile(user_id=current_user().id, updates=json_body()), message="Profile updated")

    # HR

    @app.route("/hr/employees", methods=["GET"], endpoint="list_employees")
    @hr_required
    def list_employees():
        active_only = request.args.get("active") in {"1", "true", "yes"}
        return ok(svc.list_employees(active_only=active_only))

    @app.route("/hr/employees/<user_id>", methods=["GET"], endpoint="get_employee")
    @hr_required
    def get_employee(user_id: str):
        return ok(svc.get(user_id))

    @app.route("/hr/employees", methods=["POST"], endpoint="create_employee")
    @hr_required
    def create_employee():
        body = json_body()
        try:
            role = Role(body.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Invalid role")
        user_id = svc.create_employee(
            current_role=current_user().role,
            email=body.get("email") or "",
            password=body.get("password") or "",
            full_name=body.get("full_name") or "",
            employee_id=body.get("employee_id") or "",
            phone=body.get("phone"),
            role=role,
            department=body.get("department"),
            designation=body.get("designation"),
            date_of_joining=parse_optional_date(body.get("date_of_joining"), "date_of_joining"),
            organization_id=body.get("organization_id"),
            today=container.attendance_service.today(),
        )
        return ok({"id": user_id}, message="Employee created", status=201)

    @app.route("/hr/employees/<user_id>", methods=["PATCH"], endpoint="update_employee")
    @hr_required
    def update_employee(user_id: str):
        emp = svc.update_employee(current_role=current_user().role, user_id=user_id, updates=json_body())
        return ok(emp, message="Employee updated")

    @app.route("/hr/employees/<user_id>/active", methods=["POST"], endpoint="set_employee_active")
    @hr_required
    def set_employee_active(user_id: str):
        is_active = bool(json_body().get("is_active"))
        svc.set_active(current_role=current_user().role, user_id=user_id, is_active=is_active)
        return ok(message="Employee activated" if is_active else "Employee deactivated")

    @app.route("/hr/employees/<user_id>", methods=["DELETE"], endpoint="delete_employee")
    @hr_required
    def delete_employee(user_id: str):
        user = current_user()
        svc.delete_employee(current_role=user.role, current_user_id=user.id, user_id=user_id)
        return ok(message="Employee deleted")
