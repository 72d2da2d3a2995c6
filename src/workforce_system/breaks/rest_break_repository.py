from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..backend.connection import BackendClient, eq, gte, lt, lte
from ..backend.rest_base import iso_or_none, row_date, row_datetime
from ..core.enums import BreakStatus
from .model import BreakRequest
from .repository import BreakRequestRepository

TABLE = "break_requests"


def _to_request(r: Dict[str, Any]) -> BreakRequest:
    duration = r.get("duration_minutes")
    return BreakRequest(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        attendance_record_id=str(r["attendance_record_id"]),
        request_date=row_date(r["request_date"]),
        requested_start_time=row_datetime(r.get("requested_start_time")),
        requested_end_time=row_datetime(r.get("requested_end_time")),
        status=BreakStatus(r["status"]),
        approved_start_time=row_datetime(r.get("approved_start_time")),
        approved_end_time=row_datetime(r.get("approved_end_time")),
        duration_minutes=int(duration) if duration is not None else None,
        reason=r.get("reason"),
        notes=r.get("notes"),
        requested_by=r.get("requested_by"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=row_datetime(r.get("reviewed_at")),
        reviewer_notes=r.get("reviewer_notes"),
        created_at=row_datetime(r.get("created_at")),
    )


class RestBreakRequestRepository(BreakRequestRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, request_id: str) -> Optional[BreakRequest]:
        r = self._client.select_one(TABLE, filters=[eq("id", request_id)])
        return _to_request(r) if r else None

    def list_requests(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[BreakStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[BreakRequest]:
        filters = []
        if user_id is not None:
            filters.append(eq("user_id", user_id))
        if status is not None:
            filters.append(eq("status", status))
        if start_date is not None:
            filters.append(gte("request_date", start_date))
        if end_date is not None:
            filters.append(lte("request_date", end_date))
        rows = self._client.select(TABLE, filters=filters, order=["created_at.desc"], limit=limit)
        return [_to_request(r) for r in rows]

    def list_for_record(self, attendance_record_id: str) -> Sequence[BreakRequest]:
        rows = self._client.select(
            TABLE,
            filters=[eq("attendance_record_id", attendance_record_id)],
            order=["requested_start_time.asc"],
        )
        return [_to_request(r) for r in rows]

    def list_pending_started_before(self, moment: datetime) -> Sequence[BreakRequest]:
        rows = self._client.select(
            TABLE,
            filters=[eq("status", BreakStatus.PENDING), lt("requested_start_time", moment)],
        )
        return [_to_request(r) for r in rows]

    def create(
        self,
        *,
        user_id: str,
        attendance_record_id: str,
        request_date: date,
        requested_start_time: datetime,
        requested_end_time: datetime,
        requested_by: str,
        status: BreakStatus = BreakStatus.PENDING,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        reviewed_by: Optional[str] = None,
        reviewed_at: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
    ) -> BreakRequest:
        r = self._client.insert(
            TABLE,
            {
                "user_id": user_id,
                "attendance_record_id": attendance_record_id,
                "request_date": request_date.isoformat(),
                "requested_start_time": requested_start_time.isoformat(),
                "requested_end_time": requested_end_time.isoformat(),
                "requested_by": requested_by,
                "status": status.value,
                "reason": reason,
                "notes": notes,
                "approved_start_time": iso_or_none(approved_start_time),
                "approved_end_time": iso_or_none(approved_end_time),
                "duration_minutes": duration_minutes,
                "reviewed_by": reviewed_by,
                "reviewed_at": iso_or_none(reviewed_at),
                "reviewer_notes": reviewer_notes,
            },
        )
        return _to_request(r)

    def _update(self, request_id: str, values: Dict[str, Any]) -> Optional[BreakRequest]:
        rows = self._client.update(TABLE, values, filters=[eq("id", request_id)])
        return _to_request(rows[0]) if rows else None

    def decide(
        self,
        *,
        request_id: str,
        status: BreakStatus,
        reviewed_by: Optional[str],
        reviewed_at: Optional[datetime],
        reviewer_notes: Optional[str] = None,
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
    ) -> Optional[BreakRequest]:
        values: Dict[str, Any] = {
            "status": status.value,
            "reviewer_notes": reviewer_notes,
        }
        if reviewed_by is not None:
            values["reviewed_by"] = reviewed_by
        if reviewed_at is not None:
            values["reviewed_at"] = reviewed_at.isoformat()
        if status == BreakStatus.APPROVED:
            values.update(
                approved_start_time=iso_or_none(approved_start_time),
                approved_end_time=iso_or_none(approved_end_time),
                duration_minutes=duration_minutes,
            )
        return self._update(request_id, values)

    def update_approved(
        self,
        *,
        request_id: str,
        approved_start_time: datetime,
        approved_end_time: datetime,
        duration_minutes: int,
        notes: Optional[str],
        reviewed_by: str,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> Optional[BreakRequest]:
        return self._update(
            request_id,
            {
                "approved_start_time": approved_start_time.isoformat(),
                "approved_end_time": approved_end_time.isoformat(),
                "duration_minutes": int(duration_minutes),
                "notes": notes,
                "reviewed_by": reviewed_by,
                "reviewed_at": reviewed_at.isoformat(),
                "reviewer_notes": reviewer_notes,
            },
        )

    def delete_pending(self, request_id: str) -> bool:
        rows = self._client.delete(TABLE, filters=[eq("id", request_id), eq("status", BreakStatus.PENDING)])
        return len(rows) > 0
