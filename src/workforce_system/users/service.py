from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, require_min_length, require_non_empty
from ..core.enums import Role, WeekDay
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Fields an employee may change on their own profile.
PROFILE_FIELDS = {"full_name", "phone", "account_number", "ifsc_code", "aadhaar_number", "date_of_birth"}

# Fields HR may change on any employee.
EMPLOYEE_FIELDS = PROFILE_FIELDS | {
    "email",
    "employee_id",
    "department",
    "designation",
    "working_days",
    "daily_working_hours",
    "wifi_verification_required",
    "is_active",
}


def _clean_fields(updates: Mapping[str, Any], allowed: set) -> dict:
    unknown = set(updates) - allowed
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    out: dict = {}
    for key, value in updates.items():
        if key == "full_name":
            out[key] = require_non_empty(value, "Full name")
        elif key == "working_days":
            try:
                out[key] = [WeekDay(str(d).lower()).value for d in (value or [])]
            except ValueError:
                raise ValidationError("Invalid working day")
        elif key == "daily_working_hours":
            try:
                hours = float(value)
            except (TypeError, ValueError):
                raise ValidationError("Daily working hours must be a number")
            if hours <= 0 or hours > 24:
                raise ValidationError("Daily working hours must be between 0 and 24")
            out[key] = hours
        elif key == "date_of_birth":
            out[key] = parse_iso_date(value).isoformat() if value else None
        elif key in {"wifi_verification_required", "is_active"}:
            out[key] = bool(value)
        elif isinstance(value, str):
            out[key] = optional_text(value)
        else:
            out[key] = value
    if not out:
        raise ValidationError("Nothing to update")
    return out


class EmployeeService:
    """Use case: manage employees (HR) and own profile (employee)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, user_id: str) -> Employee:
        emp = self._employees.get_by_id(user_id)
        if not emp:
            raise NotFoundError("Employee not found")
        return emp

    def list_employees(self, *, active_only: bool = False) -> Sequence[Employee]:
        return self._employees.list_employees(active_only=active_only, role=Role.EMPLOYEE)

    def create_employee(
        self,
        *,
        current_role: Role,
        email: str,
        password: str,
        full_name: str,
        employee_id: str,
        phone: Optional[str] = None,
        role: Role = Role.EMPLOYEE,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        date_of_joining: Optional[date] = None,
        organization_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> str:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can add employees")

        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Invalid email address")
        full_name = require_non_empty(full_name, "Full name")
        employee_id = require_non_empty(employee_id, "Employee ID")
        require_min_length(password, "Password", 6)
        if role == Role.ADMIN and current_role != Role.ADMIN:
            raise AuthorizationError("Only an admin can create admin accounts")

        user_id = self._employees.create_with_auth(
            email=email,
            password=password,
            full_name=full_name,
            employee_id=employee_id,
            phone=optional_text(phone),
            role=role,
            department=optional_text(department),
            designation=optional_text(designation),
            date_of_joining=date_of_joining or today or date.today(),
            organization_id=organization_id,
        )
        logger.info("Created employee %s (%s)", employee_id, user_id)
        return user_id

    def update_profile(self, *, user_id: str, updates: Mapping[str, Any]) -> Employee:
        fields = _clean_fields(updates, PROFILE_FIELDS)
        updated = self._employees.update_fields(user_id, fields)
        if not updated:
            raise NotFoundError("Employee not found")
        return updated

    def update_employee(self, *, current_role: Role, user_id: str, updates: Mapping[str, Any]) -> Employee:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can edit employees")
        fields = _clean_fields(updates, EMPLOYEE_FIELDS)
        updated = self._employees.update_fields(user_id, fields)
        if not updated:
            raise NotFoundError("Employee not found")
        logger.info("Updated employee %s fields=%s", user_id, sorted(fields))
        return updated

    def set_active(self, *, current_role: Role, user_id: str, is_active: bool) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can change employee status")
        if not self._employees.set_active(user_id, is_active=is_active):
            raise NotFoundError("Employee not found")
        logger.info("%s employee %s", "Activated" if is_active else "Deactivated", user_id)

    def delete_employee(self, *, current_role: Role, current_user_id: str, user_id: str) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can delete employees")
        if user_id == current_user_id:
            raise ValidationError("You cannot delete your own account")

        emp = self.get(user_id)
        if emp.role == Role.ADMIN:
            raise ValidationError("Cannot delete an admin account")

        self._employees.delete_with_cascade(user_id)
        logger.info("Deleted employee %s with cascade", user_id)
