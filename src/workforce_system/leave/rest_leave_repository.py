from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..backend.connection import BackendClient, eq, gte, in_, lte
from ..backend.rest_base import row_date, row_datetime, row_int
from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest
from .repository import LeaveRepository

TABLE = "leave_requests"


def _to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=row_date(r["start_date"]),
        end_date=row_date(r["end_date"]),
        total_days=row_int(r.get("total_days")),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        created_at=row_datetime(r.get("created_at")),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=row_datetime(r.get("reviewed_at")),
        reviewer_notes=r.get("reviewer_notes"),
    )


class RestLeaveRepository(LeaveRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        r = self._client.select_one(TABLE, filters=[eq("id", request_id)])
        return _to_leave(r) if r else None

    def list_requests(
        self,
        *,
        user_id: Optional[str] = None,
        statuses: Optional[Sequence[LeaveStatus]] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
        end_from: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        filters = []
        if user_id is not None:
            filters.append(eq("user_id", user_id))
        if statuses:
            filters.append(in_("status", list(statuses)))
        if start_from is not None:
            filters.append(gte("start_date", start_from))
        if end_until is not None:
            filters.append(lte("end_date", end_until))
        if end_from is not None:
            filters.append(gte("end_date", end_from))
        rows = self._client.select(TABLE, filters=filters, order=["start_date.asc"])
        return [_to_leave(r) for r in rows]

    def create(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
    ) -> LeaveRequest:
        r = self._client.insert(
            TABLE,
            {
                "user_id": user_id,
                "leave_type": leave_type.value,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "total_days": int(total_days),
                "reason": reason,
                "status": LeaveStatus.PENDING.value,
            },
        )
        return _to_leave(r)

    def update_pending(
        self,
        *,
        request_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
    ) -> Optional[LeaveRequest]:
        rows = self._client.update(
            TABLE,
            {
                "leave_type": leave_type.value,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
                "total_days": int(total_days),
                "reason": reason,
            },
            filters=[eq("id", request_id), eq("status", LeaveStatus.PENDING)],
        )
        return _to_leave(rows[0]) if rows else None

    def set_status(
        self,
        *,
        request_id: str,
        status: LeaveStatus,
        reviewed_by: Optional[str] = None,
        reviewed_at: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
    ) -> Optional[LeaveRequest]:
        values: Dict[str, Any] = {"status": status.value}
        if reviewed_by is not None:
            values.update(
                reviewed_by=reviewed_by,
                reviewed_at=reviewed_at.isoformat() if reviewed_at else None,
                reviewer_notes=reviewer_notes,
            )
        rows = self._client.update(TABLE, values, filters=[eq("id", request_id)])
        return _to_leave(rows[0]) if rows else None

    def delete(self, request_id: str) -> bool:
        return len(self._client.delete(TABLE, filters=[eq("id", request_id)])) > 0
