from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import OfficeNetwork


class OfficeNetworkRepository(Protocol):
    def list_for_organization(self, organization_id: str, *, active_only: bool = True) -> Sequence[OfficeNetwork]:
        raise NotImplementedError

    def create(
        self,
        *,
        organization_id: str,
        ssid: str,
        description: Optional[str] = None,
    ) -> OfficeNetwork:
        raise NotImplementedError

    def update_fields(self, network_id: str, fields: Mapping[str, Any]) -> Optional[OfficeNetwork]:
        raise NotImplementedError

    def delete(self, network_id: str) -> bool:
        raise NotImplementedError
