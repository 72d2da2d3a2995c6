from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from ..backend.connection import BackendClient, eq
from ..backend.rest_base import row_date, row_float, row_list
from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import Role, WeekDay
from ..core.exceptions import BackendError
from .model import Employee
from .repository import EmployeeRepository

TABLE = "users"


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        id=str(r["id"]),
        employee_id=r.get("employee_id") or "",
        full_name=r.get("full_name") or "",
        email=r.get("email") or "",
        role=Role(r.get("role") or Role.EMPLOYEE.value),
        department=r.get("department"),
        designation=r.get("designation"),
        phone=r.get("phone"),
        organization_id=r.get("organization_id"),
        working_days=tuple(WeekDay(d) for d in row_list(r.get("working_days"))),
        daily_working_hours=row_float(r.get("daily_working_hours"), DEFAULT_DAILY_HOURS),
        base_salary=row_float(r.get("base_salary")),
        hourly_rate=row_float(r.get("hourly_rate")),
        monthly_total_hours=row_float(r.get("monthly_total_hours")),
        is_active=bool(r.get("is_active", True)),
        wifi_verification_required=bool(r.get("wifi_verification_required", False)),
        account_number=r.get("account_number"),
        ifsc_code=r.get("ifsc_code"),
        aadhaar_number=r.get("aadhaar_number"),
        date_of_birth=row_date(r.get("date_of_birth")),
        date_of_joining=row_date(r.get("date_of_joining")),
    )


class RestEmployeeRepository(EmployeeRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, user_id: str) -> Optional[Employee]:
        r = self._client.select_one(TABLE, filters=[eq("id", user_id)])
        return _to_employee(r) if r else None

    def list_employees(self, *, active_only: bool = False, role: Optional[Role] = None) -> Sequence[Employee]:
        filters = []
        if active_only:
            filters.append(eq("is_active", True))
        if role is not None:
            filters.append(eq("role", role))
        rows = self._client.select(TABLE, filters=filters, order=["full_name.asc"])
        return [_to_employee(r) for r in rows]

    def update_fields(self, user_id: str, fields: Mapping[str, Any]) -> Optional[Employee]:
        rows = self._client.update(TABLE, dict(fields), filters=[eq("id", user_id)])
        return _to_employee(rows[0]) if rows else None

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        rows = self._client.update(TABLE, {"is_active": bool(is_active)}, filters=[eq("id", user_id)])
        return len(rows) > 0

    def create_with_auth(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        employee_id: str,
        phone: Optional[str],
        role: Role,
        department: Optional[str],
        designation: Optional[str],
        date_of_joining: date,
        organization_id: Optional[str],
    ) -> str:
        result = self._client.rpc(
            "create_employee_with_auth",
            {
                "p_email": email,
                "p_password": password,
                "p_full_name": full_name,
                "p_employee_id": employee_id,
                "p_phone": phone,
                "p_role": role.value,
                "p_department": department,
                "p_designation": designation,
                "p_date_of_joining": date_of_joining.isoformat(),
                "p_organization_id": organization_id,
            },
        )
        # The procedure answers with a JSON object; failures come back as success=false.
        if isinstance(result, dict):
            if result.get("success") is False:
                raise BackendError(str(result.get("error") or result.get("message") or "Employee creation failed"))
            new_id = result.get("user_id") or result.get("id")
        else:
            new_id = result
        if not new_id:
            raise BackendError("Employee creation returned no user id")
        return str(new_id)

    def delete_with_cascade(self, user_id: str) -> None:
        result = self._client.rpc("delete_employee_with_cascade", {"p_employee_id": user_id})
        if isinstance(result, dict) and result.get("success") is False:
            raise BackendError(str(result.get("error") or result.get("message") or "Employee deletion failed"))
