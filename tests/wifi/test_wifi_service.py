from __future__ import annotations

import pytest

from workforce_system.core.enums import Role
from workforce_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from workforce_system.wifi.service import WifiService, normalize_ssid


@pytest.fixture
def service(networks):
    return WifiService(networks)


def test_normalize_ssid():
    assert normalize_ssid('"Office-5G"') == "Office-5G"
    assert normalize_ssid("  Office-5G ") == "Office-5G"
    assert normalize_ssid('""') is None
    assert normalize_ssid(None) is None


def test_verify_when_not_required(service, new_employee):
    result = service.verify(new_employee("u1"), None)
    assert result.verified is True
    assert result.required is False


def test_verify_against_active_networks(service, new_employee):
    emp = new_employee("u1", wifi_verification_required=True)

    ok = service.verify(emp, '"Office-5G"')
    assert ok.verified is True
    assert ok.office_networks == ("Office-5G",)

    assert service.verify(emp, "Old-Office").verified is False
    assert service.verify(emp, None).verified is False


def test_verify_without_organization(service, new_employee):
    emp = new_employee("u1", wifi_verification_required=True, organization_id=None)
    result = service.verify(emp, "Office-5G")
    assert result.verified is False
    assert result.office_networks == ()


def test_manage_networks(service):
    network = service.add_network(current_role=Role.HR, organization_id="org-1", ssid=' "Guest" ', description=" ")
    assert network.ssid == "Guest"
    assert network.description is None
    assert {n.ssid for n in service.list_networks("org-1")} == {"Office-5G", "Guest"}

    disabled = service.set_network_active(current_role=Role.HR, network_id=network.id, is_active=False)
    assert disabled.is_active is False
    assert len(service.list_networks("org-1", active_only=False)) == 3

    service.delete_network(current_role=Role.HR, network_id=network.id)
    with pytest.raises(NotFoundError):
        service.delete_network(current_role=Role.HR, network_id=network.id)


def test_network_management_rules(service):
    with pytest.raises(AuthorizationError):
        service.add_network(current_role=Role.EMPLOYEE, organization_id="org-1", ssid="x")
    with pytest.raises(ValidationError):
        service.add_network(current_role=Role.HR, organization_id="org-1", ssid='""')
    with pytest.raises(NotFoundError):
        service.set_network_active(current_role=Role.HR, network_id="missing", is_active=True)
