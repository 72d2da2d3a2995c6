from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Employee
from .model import OfficeNetwork, WifiVerification
from .repository import OfficeNetworkRepository

logger = logging.getLogger(__name__)

_QUOTED = re.compile(r'^"(.*)"$')


def normalize_ssid(ssid: Optional[str]) -> Optional[str]:
    """Strip the surrounding quotes some platforms report around SSIDs."""
    if ssid is None:
        return None
    ssid = _QUOTED.sub(r"\1", ssid.strip())
    return ssid or None


class WifiService:
    def __init__(self, networks: OfficeNetworkRepository):
        self._networks = networks

    def list_networks(self, organization_id: str, *, active_only: bool = True) -> Sequence[OfficeNetwork]:
        return self._networks.list_for_organization(organization_id, active_only=active_only)

    def verify(self, employee: Employee, reported_ssid: Optional[str]) -> WifiVerification:
        ssid = normalize_ssid(reported_ssid)
        if not employee.wifi_verification_required:
            return WifiVerification(ssid=ssid, verified=True, required=False)

        allowed: tuple = ()
        if employee.organization_id:
            allowed = tuple(n.ssid for n in self.list_networks(employee.organization_id))

        verified = ssid is not None and ssid in allowed
        logger.info("WiFi check for %s: ssid=%r verified=%s", employee.id, ssid, verified)
        return WifiVerification(ssid=ssid, verified=verified, required=True, office_networks=allowed)

    def add_network(
        self,
        *,
        current_role: Role,
        organization_id: str,
        ssid: str,
        description: Optional[str] = None,
    ) -> OfficeNetwork:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can manage office networks")
        ssid = normalize_ssid(require_non_empty(ssid, "SSID"))
        if not ssid:
            raise ValidationError("SSID is required")
        return self._networks.create(
            organization_id=organization_id,
            ssid=ssid,
            description=optional_text(description),
        )

    def set_network_active(self, *, current_role: Role, network_id: str, is_active: bool) -> OfficeNetwork:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can manage office networks")
        updated = self._networks.update_fields(network_id, {"is_active": bool(is_active)})
        if not updated:
            raise NotFoundError("Network not found")
        return updated

    def delete_network(self, *, current_role: Role, network_id: str) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can manage office networks")
        if not self._networks.delete(network_id):
            raise NotFoundError("Network not found")
