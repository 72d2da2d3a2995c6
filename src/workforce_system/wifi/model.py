from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class OfficeNetwork:
    id: str
    organization_id: str
    ssid: str
    description: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class WifiVerification:
    """Outcome of checking a reported SSID against the office networks."""

    ssid: Optional[str]
    verified: bool
    required: bool
    office_networks: Tuple[str, ...] = ()
