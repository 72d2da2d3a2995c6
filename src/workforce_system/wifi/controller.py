from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user, hr_required, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    svc = container.wifi_service

    @app.route("/wifi/verify", methods=["POST"], endpoint="verify_wifi")
    @login_required
    def verify_wifi():
        emp = container.employee_service.get(current_user().id)
        return ok(svc.verify(emp, json_body().get("ssid")))

    @app.route("/hr/wifi-networks", methods=["GET"], endpoint="list_wifi_networks")
    @hr_required
    def list_wifi_networks():
        org = request.args.get("organization_id")
        if not org:
            raise ValidationError("organization_id is required")
        active_only = request.args.get("all") not in {"1", "true", "yes"}
        return ok(svc.list_networks(org, active_only=active_only))

    @app.route("/hr/wifi-networks", methods=["POST"], endpoint="add_wifi_network")
    @hr_required
    def add_wifi_network():
        body = json_body()
        org = body.get("organization_id")
        if not org:
            raise ValidationError("organization_id is required")
        network = svc.add_network(
            current_role=current_user().role,
            organization_id=org,
            ssid=body.get("ssid") or "",
            description=body.get("description"),
        )
        return ok(network, message="Network added", status=201)

    @app.route("/hr/wifi-networks/<network_id>/active", methods=["POST"], endpoint="toggle_wifi_network")
    @hr_required
    def toggle_wifi_network(network_id: str):
        network = svc.set_network_active(
            current_role=current_user().role,
            network_id=network_id,
            is_active=bool(json_body().get("is_active")),
        )
        return ok(network)

    @app.route("/hr/wifi-networks/<network_id>", methods=["DELETE"], endpoint="delete_wifi_network")
    @hr_required
    def delete_wifi_network(network_id: str):
        svc.delete_network(current_role=current_user().role, network_id=network_id)
        return ok(message="Network deleted")
