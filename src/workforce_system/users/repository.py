from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this interface, never on the backend client directly.
    """

    def get_by_id(self, user_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_employees(self, *, active_only: bool = False, role: Optional[Role] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def update_fields(self, user_id: str, fields: Mapping[str, Any]) -> Optional[Employee]:
        raise NotImplementedError

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        raise NotImplementedError

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
        """Create the auth identity and profile row; returns the new user id."""

        raise NotImplementedError

    def delete_with_cascade(self, user_id: str) -> None:
        raise NotImplementedError
