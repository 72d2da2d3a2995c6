from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

import requests

from .attendance.rest_attendance_repository import RestAttendanceRepository
from .attendance.service import AttendanceService
from .backend.connection import BackendClient, BackendConfig
from .breaks.rest_break_repository import RestBreakRequestRepository
from .breaks.service import BreakService
from .common.datetime_utils import get_timezone
from .core.constants import DEFAULT_MINIMUM_VALID_HOURS, DEFAULT_TIMEZONE
from .leave.rest_leave_repository import RestLeaveRepository
from .leave.service import LeaveService
from .payroll.earnings_service import BulkSalarySheetService, EarningsService, SalarySlipService
from .payroll.rest_payroll_repository import (
    RestEarningsRepository,
    RestSalaryChangeRepository,
    RestSalaryRecordRepository,
)
from .payroll.service import PayrollReportService, SalaryChangeService, SalaryService
from .users.rest_user_repository import RestEmployeeRepository
from .users.service import EmployeeService
from .wifi.rest_wifi_repository import RestOfficeNetworkRepository
from .wifi.service import WifiService


@dataclass(frozen=True)
class Container:
    client: BackendClient
    tz: tzinfo

    employees_repo: RestEmployeeRepository
    attendance_repo: RestAttendanceRepository
    breaks_repo: RestBreakRequestRepository
    leave_repo: RestLeaveRepository
    salary_repo: RestSalaryRecordRepository
    earnings_repo: RestEarningsRepository
    salary_changes_repo: RestSalaryChangeRepository
    networks_repo: RestOfficeNetworkRepository

    employee_service: EmployeeService
    wifi_service: WifiService
    attendance_service: AttendanceService
    break_service: BreakService
    leave_service: LeaveService
    payroll_report_service: PayrollReportService
    salary_service: SalaryService
    salary_change_service: SalaryChangeService
    earnings_service: EarningsService
    salary_slip_service: SalarySlipService
    bulk_salary_service: BulkSalarySheetService


def build_container(
    *,
    backend_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    minimum_valid_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    session: Optional[requests.Session] = None,
) -> Container:
    config = BackendConfig(
        url=str(backend_config["url"]),
        api_key=str(backend_config.get("api_key", "")),
        timeout=float(backend_config.get("timeout", 30)),
    )
    client = BackendClient(config, session=session)
    tz = get_timezone(timezone)

    employees_repo = RestEmployeeRepository(client)
    attendance_repo = RestAttendanceRepository(client)
    breaks_repo = RestBreakRequestRepository(client)
    leave_repo = RestLeaveRepository(client)
    salary_repo = RestSalaryRecordRepository(client)
    earnings_repo = RestEarningsRepository(client)
    salary_changes_repo = RestSalaryChangeRepository(client)
    networks_repo = RestOfficeNetworkRepository(client)

    wifi_service = WifiService(networks_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        wifi_service,
        tz=tz,
        minimum_valid_hours=minimum_valid_hours,
    )

    return Container(
        client=client,
        tz=tz,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        breaks_repo=breaks_repo,
        leave_repo=leave_repo,
        salary_repo=salary_repo,
        earnings_repo=earnings_repo,
        salary_changes_repo=salary_changes_repo,
        networks_repo=networks_repo,
        employee_service=EmployeeService(employees_repo),
        wifi_service=wifi_service,
        attendance_service=attendance_service,
        break_service=BreakService(breaks_repo, attendance_repo, tz=tz),
        leave_service=LeaveService(leave_repo),
        payroll_report_service=PayrollReportService(attendance_repo, tz=tz),
        salary_service=SalaryService(salary_repo),
        salary_change_service=SalaryChangeService(salary_changes_repo),
        earnings_service=EarningsService(earnings_repo),
        salary_slip_service=SalarySlipService(employees_repo, earnings_repo, attendance_repo),
        bulk_salary_service=BulkSalarySheetService(employees_repo, earnings_repo),
    )
