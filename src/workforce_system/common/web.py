"""Flask glue shared by the module controllers.

Identity comes from the upstream gateway as ``X-User-Id`` / ``X-User-Role``
headers; domain errors are mapped onto JSON responses in one place.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request
from flask.json.provider import DefaultJSONProvider

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, BackendError, DomainError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"


@dataclass(frozen=True)
class CurrentUser:
    id: str
    role: Role


class WorkforceJSONProvider(DefaultJSONProvider):
    """ISO dates, enum values and dataclasses as plain objects."""

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        if isinstance(o, Enum):
            return o.value
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return {f.name: getattr(o, f.name) for f in dataclasses.fields(o)}
        return DefaultJSONProvider.default(o)


def current_user() -> CurrentUser:
    user = g.get("current_user")
    if user is None:
        raise AuthorizationError("Authentication required")
    return user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if g.get("current_user") is None:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def hr_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = g.get("current_user")
        if user is None:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        if not user.role.is_reviewer:
            return jsonify({"success": False, "message": "HR access required"}), 403
        return view(*args, **kwargs)

    return wrapper


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200):
    body: dict = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def parse_date(value: Optional[str], field_name: str = "date") -> date:
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_date(value)


def parse_optional_date(value: Optional[str], field_name: str = "date") -> Optional[date]:
    return parse_date(value, field_name) if value else None


def parse_datetime(value: Optional[str], field_name: str = "time") -> datetime:
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_iso_datetime(value)


def parse_optional_datetime(value: Optional[str], field_name: str = "time") -> Optional[datetime]:
    return parse_datetime(value, field_name) if value else None


def parse_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def parse_float(value: Any, field_name: str, default: Optional[float] = None) -> float:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def install(app: Flask) -> None:
    """Attach identity loading, JSON encoding and error mapping to the app."""
    app.json = WorkforceJSONProvider(app)

    @app.before_request
    def load_current_user():
        g.current_user = None
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
        role = (request.headers.get(USER_ROLE_HEADER) or "").strip().lower()
        if not user_id:
            return
        try:
            g.current_user = CurrentUser(id=user_id, role=Role(role or Role.EMPLOYEE.value))
        except ValueError:
            logger.warning("Ignoring unknown role %r for user %s", role, user_id)

    def _error(exc: DomainError, status: int):
        return jsonify({"success": False, "message": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation(exc):
        return _error(exc, 400)

    @app.errorhandler(AuthorizationError)
    def handle_authorization(exc):
        return _error(exc, 403)

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc):
        return _error(exc, 404)

    @app.errorhandler(BackendError)
    def handle_backend(exc):
        logger.error("Backend failure (code=%s status=%s): %s", exc.code, exc.status, exc)
        return _error(exc, 502)
