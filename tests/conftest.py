from __future__ import annotations

import dataclasses
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from workforce_system.attendance.model import AttendanceRecord
from workforce_system.breaks.model import BreakRequest
from workforce_system.core.enums import BreakStatus, LeaveStatus, Role, SalaryStatus, WeekDay
from workforce_system.leave.model import LeaveRequest
from workforce_system.payroll.model import SalaryChange, SalaryRecord
from workforce_system.users.model import Employee
from workforce_system.wifi.model import OfficeNetwork

IST = ZoneInfo("Asia/Kolkata")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id = {e.id: e for e in employees}
        self.created = []
        self.deleted = []

    def add(self, emp: Employee) -> Employee:
        self._by_id[emp.id] = emp
        return emp

    def get_by_id(self, user_id: str) -> Optional[Employee]:
        return self._by_id.get(user_id)

    def list_employees(self, *, active_only: bool = False, role: Optional[Role] = None):
        items = [e for e in self._by_id.values() if (e.is_active or not active_only) and (role is None or e.role == role)]
        return sorted(items, key=lambda e: e.full_name)

    def update_fields(self, user_id: str, fields):
        emp = self._by_id.get(user_id)
        if not emp:
            return None
        values = dict(fields)
        if "working_days" in values:
            values["working_days"] = tuple(WeekDay(d) for d in values["working_days"])
        if "date_of_birth" in values and values["date_of_birth"]:
            values["date_of_birth"] = date.fromisoformat(values["date_of_birth"])
        emp = dataclasses.replace(emp, **values)
        self._by_id[user_id] = emp
        return emp

    def set_active(self, user_id: str, *, is_active: bool) -> bool:
        return self.update_fields(user_id, {"is_active": is_active}) is not None

    def create_with_auth(self, **kwargs) -> str:
        self.created.append(kwargs)
        return f"new-{len(self.created)}"

    def delete_with_cascade(self, user_id: str) -> None:
        self.deleted.append(user_id)
        self._by_id.pop(user_id, None)


class InMemoryAttendance:
    def __init__(self):
        self.records: dict[str, AttendanceRecord] = {}
        self.report_rows = []
        self.report_args = None
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self.records[record.id] = record
        return record

    def get_by_id(self, record_id: str):
        return self.records.get(record_id)

    def get_for_user_and_date(self, user_id: str, work_date: date):
        for r in self.records.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def list_for_user(self, user_id, *, start_date=None, end_date=None, limit=None):
        items = [
            r
            for r in self.records.values()
            if r.user_id == user_id
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit] if limit else items

    def list_for_range(self, *, start_date, end_date, user_id=None):
        return [
            r
            for r in self.records.values()
            if start_date <= r.work_date <= end_date and (user_id is None or r.user_id == user_id)
        ]

    def create(self, *, user_id, work_date, check_in_time, **kwargs) -> AttendanceRecord:
        self._id += 1
        record = AttendanceRecord(
            id=f"att-{self._id}",
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            **kwargs,
        )
        return self.add(record)

    def _replace(self, record_id, **values):
        record = self.records.get(record_id)
        if not record:
            return None
        return self.add(dataclasses.replace(record, **values))

    def update_checkout(self, *, record_id, check_out_time, total_hours, is_valid_day, notes=None):
        return self._replace(
            record_id,
            check_out_time=check_out_time,
            total_hours=total_hours,
            is_valid_day=is_valid_day,
            notes=notes,
        )

    def admin_update_record(self, *, record_id, check_in_time, check_out_time, total_hours, is_valid_day, notes=None):
        return self._replace(
            record_id,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            total_hours=total_hours,
            is_valid_day=is_valid_day,
            notes=notes,
        )

    def set_breaks(self, *, record_id, breaks) -> bool:
        return self._replace(record_id, breaks=tuple(breaks)) is not None

    def delete(self, record_id) -> bool:
        return self.records.pop(record_id, None) is not None

    def get_report_rows(self, *, start_date, end_date, user_id=None):
        self.report_args = {"start_date": start_date, "end_date": end_date, "user_id": user_id}
        return self.report_rows


class InMemoryBreaks:
    def __init__(self):
        self.requests: dict[str, BreakRequest] = {}
        self._id = 0

    def add(self, req: BreakRequest) -> BreakRequest:
        self.requests[req.id] = req
        return req

    def get_by_id(self, request_id):
        return self.requests.get(request_id)

    def list_requests(self, *, user_id=None, status=None, start_date=None, end_date=None, limit=None):
        items = [
            r
            for r in self.requests.values()
            if (user_id is None or r.user_id == user_id) and (status is None or r.status == status)
        ]
        return items[:limit] if limit else items

    def list_for_record(self, attendance_record_id):
        return [r for r in self.requests.values() if r.attendance_record_id == attendance_record_id]

    def list_pending_started_before(self, moment):
        return [
            r
            for r in self.requests.values()
            if r.status == BreakStatus.PENDING and r.requested_start_time and r.requested_start_time < moment
        ]

    def create(self, *, user_id, attendance_record_id, request_date, requested_start_time, requested_end_time, **kwargs):
        self._id += 1
        kwargs.setdefault("status", BreakStatus.PENDING)
        return self.add(
            BreakRequest(
                id=f"brk-{self._id}",
                user_id=user_id,
                attendance_record_id=attendance_record_id,
                request_date=request_date,
                requested_start_time=requested_start_time,
                requested_end_time=requested_end_time,
                **kwargs,
            )
        )

    def _replace(self, request_id, **values):
        req = self.requests.get(request_id)
        if not req:
            return None
        return self.add(dataclasses.replace(req, **values))

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, reviewer_notes=None, **approved):
        return self._replace(
            request_id,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            reviewer_notes=reviewer_notes,
            **approved,
        )

    def update_approved(self, *, request_id, **values):
        return self._replace(request_id, **values)

    def delete_pending(self, request_id) -> bool:
        req = self.requests.get(request_id)
        if not req or req.status != BreakStatus.PENDING:
            return False
        del self.requests[request_id]
        return True


class InMemoryLeaves:
    def __init__(self):
        self.requests: dict[str, LeaveRequest] = {}
        self._id = 0

    def add(self, req: LeaveRequest) -> LeaveRequest:
        self.requests[req.id] = req
        return req

    def get_by_id(self, request_id):
        return self.requests.get(request_id)

    def list_requests(self, *, user_id=None, statuses=None, start_from=None, end_until=None, end_from=None):
        return [
            r
            for r in self.requests.values()
            if (user_id is None or r.user_id == user_id)
            and (statuses is None or r.status in statuses)
            and (start_from is None or r.start_date >= start_from)
            and (end_until is None or r.end_date <= end_until)
            and (end_from is None or r.end_date >= end_from)
        ]

    def create(self, **kwargs) -> LeaveRequest:
        self._id += 1
        return self.add(LeaveRequest(id=f"lv-{self._id}", status=LeaveStatus.PENDING, **kwargs))

    def update_pending(self, *, request_id, **values):
        req = self.requests.get(request_id)
        if not req or req.status != LeaveStatus.PENDING:
            return None
        return self.add(dataclasses.replace(req, **values))

    def set_status(self, *, request_id, status, reviewed_by=None, reviewed_at=None, reviewer_notes=None):
        req = self.requests.get(request_id)
        if not req:
            return None
        return self.add(
            dataclasses.replace(
                req,
                status=status,
                reviewed_by=reviewed_by,
                reviewed_at=reviewed_at,
                reviewer_notes=reviewer_notes,
            )
        )

    def delete(self, request_id) -> bool:
        return self.requests.pop(request_id, None) is not None


class InMemorySalaries:
    def __init__(self):
        self.records: dict[str, SalaryRecord] = {}
        self._id = 0

    def add(self, record: SalaryRecord) -> SalaryRecord:
        self.records[record.id] = record
        return record

    def get_by_id(self, record_id):
        return self.records.get(record_id)

    def get_for_month(self, user_id, month, year):
        for r in self.records.values():
            if (r.user_id, r.month, r.year) == (user_id, month, year):
                return r
        return None

    def list_records(self, *, user_id=None, month=None, year=None, statuses=None, limit=None):
        items = [
            r
            for r in self.records.values()
            if (user_id is None or r.user_id == user_id)
            and (month is None or r.month == month)
            and (year is None or r.year == year)
            and (statuses is None or r.status in statuses)
        ]
        items.sort(key=lambda r: (r.year, r.month), reverse=True)
        return items[:limit] if limit else items

    def create(self, **kwargs) -> SalaryRecord:
        self._id += 1
        return self.add(SalaryRecord(id=f"sal-{self._id}", status=SalaryStatus.DRAFT, **kwargs))

    def update_fields(self, record_id, fields):
        record = self.records.get(record_id)
        if not record:
            return None
        values = dict(fields)
        if "status" in values:
            values["status"] = SalaryStatus(values["status"])
        if "payment_date" in values:
            values["payment_date"] = date.fromisoformat(values["payment_date"])
        return self.add(dataclasses.replace(record, **values))

    def delete(self, record_id) -> bool:
        return self.records.pop(record_id, None) is not None


class InMemoryEarnings:
    def __init__(self, rows=()):
        self.rows = list(rows)

    def get_for_month(self, user_id, month, year):
        for e in self.rows:
            if (e.user_id, e.month, e.year) == (user_id, month, year):
                return e
        return None

    def list_for_user(self, user_id):
        items = [e for e in self.rows if e.user_id == user_id]
        return sorted(items, key=lambda e: (e.year, e.month), reverse=True)

    def list_for_month(self, month, year):
        items = [e for e in self.rows if (e.month, e.year) == (month, year)]
        return sorted(items, key=lambda e: e.earned_salary, reverse=True)


class InMemorySalaryChanges:
    def __init__(self):
        self.changes: dict[str, SalaryChange] = {}
        self.scheduled = []
        self.apply_calls = 0

    def add(self, change: SalaryChange) -> SalaryChange:
        self.changes[change.id] = change
        return change

    def get_by_id(self, change_id):
        return self.changes.get(change_id)

    def list_changes(self, *, user_id=None, from_date=None, to_date=None):
        return [
            c
            for c in self.changes.values()
            if (user_id is None or c.user_id == user_id)
            and (from_date is None or c.effective_from >= from_date)
            and (to_date is None or c.effective_from <= to_date)
        ]

    def next_scheduled(self, user_id, *, after):
        upcoming = [c for c in self.changes.values() if c.user_id == user_id and c.effective_from > after]
        return min(upcoming, key=lambda c: c.effective_from) if upcoming else None

    def schedule(self, **kwargs):
        self.scheduled.append(kwargs)
        return {"success": True}

    def apply_pending(self):
        self.apply_calls += 1
        return {"applied": 2}

    def update_notes(self, change_id, notes):
        change = self.changes.get(change_id)
        if not change:
            return None
        return self.add(dataclasses.replace(change, notes=notes))

    def delete(self, change_id) -> bool:
        return self.changes.pop(change_id, None) is not None


class InMemoryNetworks:
    def __init__(self, networks=()):
        self.networks = {n.id: n for n in networks}
        self._id = len(self.networks)

    def list_for_organization(self, organization_id, *, active_only=True):
        return [
            n
            for n in self.networks.values()
            if n.organization_id == organization_id and (n.is_active or not active_only)
        ]

    def create(self, *, organization_id, ssid, description=None):
        self._id += 1
        network = OfficeNetwork(id=f"net-{self._id}", organization_id=organization_id, ssid=ssid, description=description)
        self.networks[network.id] = network
        return network

    def update_fields(self, network_id, fields):
        network = self.networks.get(network_id)
        if not network:
            return None
        network = dataclasses.replace(network, **dict(fields))
        self.networks[network_id] = network
        return network

    def delete(self, network_id) -> bool:
        return self.networks.pop(network_id, None) is not None


def make_employee(user_id: str = "u1", **overrides) -> Employee:
    values = dict(
        id=user_id,
        employee_id=f"EMP-{user_id}",
        full_name=f"Employee {user_id}",
        email=f"{user_id}@example.com",
        role=Role.EMPLOYEE,
        organization_id="org-1",
        working_days=(WeekDay.MONDAY, WeekDay.TUESDAY, WeekDay.WEDNESDAY, WeekDay.THURSDAY, WeekDay.FRIDAY),
        daily_working_hours=8,
    )
    values.update(overrides)
    return Employee(**values)


@pytest.fixture
def tz():
    return IST


@pytest.fixture
def employees():
    return InMemoryEmployees([make_employee("u1"), make_employee("u2", full_name="Asha Rao")])


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def breaks():
    return InMemoryBreaks()


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def salaries():
    return InMemorySalaries()


@pytest.fixture
def salary_changes():
    return InMemorySalaryChanges()


@pytest.fixture
def networks():
    return InMemoryNetworks(
        [
            OfficeNetwork(id="net-1", organization_id="org-1", ssid="Office-5G"),
            OfficeNetwork(id="net-2", organization_id="org-1", ssid="Old-Office", is_active=False),
        ]
    )


@pytest.fixture
def new_employee():
    return make_employee


@pytest.fixture
def earnings_store():
    return InMemoryEarnings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = b"" if payload is None and not text else b"x"

    def json(self):
        if self._payload is None:
            raise ValueError("no json body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session: answers from a route table and records every call."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def request(self, method, url, *, params=None, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "headers": headers})
        path = url.split("/rest/v1/", 1)[1]
        answer = self.routes.get((method, path), FakeResponse(200, []))
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(params=params, json=json)
        return answer


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_response():
    return FakeResponse
