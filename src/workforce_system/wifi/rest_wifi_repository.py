from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..backend.connection import BackendClient, eq
from .model import OfficeNetwork
from .repository import OfficeNetworkRepository

TABLE = "office_wifi_networks"


def _to_network(r: Dict[str, Any]) -> OfficeNetwork:
    return OfficeNetwork(
        id=str(r["id"]),
        organization_id=str(r.get("organization_id") or ""),
        ssid=r["ssid"],
        description=r.get("description"),
        is_active=bool(r.get("is_active", True)),
    )


class RestOfficeNetworkRepository(OfficeNetworkRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def list_for_organization(self, organization_id: str, *, active_only: bool = True) -> Sequence[OfficeNetwork]:
        filters = [eq("organization_id", organization_id)]
        if active_only:
            filters.append(eq("is_active", True))
        rows = self._client.select(TABLE, filters=filters, order=["ssid.asc"])
        return [_to_network(r) for r in rows]

    def create(
        self,
        *,
        organization_id: str,
        ssid: str,
        description: Optional[str] = None,
    ) -> OfficeNetwork:
        r = self._client.insert(
            TABLE,
            {
                "organization_id": organization_id,
                "ssid": ssid,
                "description": description,
                "is_active": True,
            },
        )
        return _to_network(r)

    def update_fields(self, network_id: str, fields: Mapping[str, Any]) -> Optional[OfficeNetwork]:
        rows = self._client.update(TABLE, dict(fields), filters=[eq("id", network_id)])
        return _to_network(rows[0]) if rows else None

    def delete(self, network_id: str) -> bool:
        return len(self._client.delete(TABLE, filters=[eq("id", network_id)])) > 0
