from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from ..backend.connection import BackendClient, eq, gte, lte
from ..backend.rest_base import iso_or_none, row_date, row_datetime, row_list
from ..core.enums import CheckInMethod, MarkedByRole
from .model import AttendanceBreak, AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

TABLE = "attendance_records"


def break_from_json(b: Dict[str, Any]) -> AttendanceBreak:
    return AttendanceBreak(
        start_time=row_datetime(b["start_time"]),
        end_time=row_datetime(b["end_time"]),
        duration_minutes=int(b.get("duration_minutes") or 0),
        notes=b.get("notes"),
    )


def break_to_json(b: AttendanceBreak) -> Dict[str, Any]:
    return {
        "start_time": b.start_time.isoformat(),
        "end_time": b.end_time.isoformat(),
        "duration_minutes": int(b.duration_minutes),
        "notes": b.notes,
    }


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    total = r.get("total_hours")
    return AttendanceRecord(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        work_date=row_date(r["date"]),
        check_in_time=row_datetime(r.get("check_in_time")),
        check_out_time=row_datetime(r.get("check_out_time")),
        total_hours=float(total) if total is not None else None,
        is_valid_day=bool(r.get("is_valid_day", False)),
        breaks=tuple(break_from_json(b) for b in row_list(r.get("breaks"))),
        marked_by=r.get("marked_by"),
        marked_by_role=MarkedByRole(r.get("marked_by_role") or MarkedByRole.SELF.value),
        check_in_method=CheckInMethod(r.get("check_in_method") or CheckInMethod.SELF.value),
        notes=r.get("notes"),
        wifi_ssid=r.get("wifi_ssid"),
        wifi_verified=bool(r.get("wifi_verified", False)),
    )


class RestAttendanceRepository(AttendanceRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        r = self._client.select_one(TABLE, filters=[eq("id", record_id)])
        return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        r = self._client.select_one(TABLE, filters=[eq("user_id", user_id), eq("date", work_date)])
        return _to_record(r) if r else None

    def list_for_user(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        filters = [eq("user_id", user_id)]
        if start_date is not None:
            filters.append(gte("date", start_date))
        if end_date is not None:
            filters.append(lte("date", end_date))
        rows = self._client.select(TABLE, filters=filters, order=["date.desc"], limit=limit)
        return [_to_record(r) for r in rows]

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        filters = [gte("date", start_date), lte("date", end_date)]
        if user_id is not None:
            filters.append(eq("user_id", user_id))
        rows = self._client.select(TABLE, filters=filters, order=["date.desc"])
        return [_to_record(r) for r in rows]

    def create(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime] = None,
        total_hours: Optional[float] = None,
        is_valid_day: bool = False,
        marked_by: Optional[str] = None,
        marked_by_role: MarkedByRole = MarkedByRole.SELF,
        check_in_method: CheckInMethod = CheckInMethod.SELF,
        notes: Optional[str] = None,
        wifi_ssid: Optional[str] = None,
        wifi_verified: bool = False,
    ) -> AttendanceRecord:
        r = self._client.insert(
            TABLE,
            {
                "user_id": user_id,
                "date": work_date.isoformat(),
                "check_in_time": check_in_time.isoformat(),
                "check_out_time": iso_or_none(check_out_time),
                "total_hours": total_hours,
                "is_valid_day": bool(is_valid_day),
                "marked_by": marked_by,
                "marked_by_role": MarkedByRole(marked_by_role).value,
                "check_in_method": CheckInMethod(check_in_method).value,
                "notes": notes,
                "wifi_ssid": wifi_ssid,
                "wifi_verified": bool(wifi_verified),
            },
        )
        return _to_record(r)

    def _update(self, record_id: str, values: Dict[str, Any]) -> Optional[AttendanceRecord]:
        rows = self._client.update(TABLE, values, filters=[eq("id", record_id)])
        return _to_record(rows[0]) if rows else None

    def update_checkout(
        self,
        *,
        record_id: str,
        check_out_time: datetime,
        total_hours: float,
        is_valid_day: bool,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        return self._update(
            record_id,
            {
                "check_out_time": check_out_time.isoformat(),
                "total_hours": total_hours,
                "is_valid_day": bool(is_valid_day),
                "notes": notes,
            },
        )

    def admin_update_record(
        self,
        *,
        record_id: str,
        check_in_time: datetime,
        check_out_time: Optional[datetime],
        total_hours: Optional[float],
        is_valid_day: bool,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        return self._update(
            record_id,
            {
                "check_in_time": check_in_time.isoformat(),
                "check_out_time": iso_or_none(check_out_time),
                "total_hours": total_hours,
                "is_valid_day": bool(is_valid_day),
                "notes": notes,
            },
        )

    def set_breaks(self, *, record_id: str, breaks: Sequence[AttendanceBreak]) -> bool:
        payload: List[Dict[str, Any]] = [break_to_json(b) for b in breaks]
        return self._update(record_id, {"breaks": payload}) is not None

    def delete(self, record_id: str) -> bool:
        return len(self._client.delete(TABLE, filters=[eq("id", record_id)])) > 0

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        filters = [gte("date", start_date), lte("date", end_date)]
        if user_id is not None:
            filters.append(eq("user_id", user_id))

        rows = self._client.select(
            TABLE,
            columns="*,users!user_id(full_name,employee_id,department)",
            filters=filters,
            order=["date.desc", "user_id.asc"],
        )

        out = []
        for r in rows:
            user = r.get("users") or {}
            out.append(
                AttendanceReportRow(
                    user_id=str(r["user_id"]),
                    full_name=user.get("full_name") or "",
                    employee_code=user.get("employee_id") or "",
                    department=user.get("department"),
                    work_date=row_date(r["date"]),
                    check_in_time=row_datetime(r.get("check_in_time")),
                    check_out_time=row_datetime(r.get("check_out_time")),
                    breaks=tuple(break_from_json(b) for b in row_list(r.get("breaks"))),
                    notes=r.get("notes"),
                )
            )
        return out
