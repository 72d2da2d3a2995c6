from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests

from ..core.constants import NO_ROWS_CODE
from ..core.exceptions import BackendError

logger = logging.getLogger(__name__)

# (column, "op.value") pairs, e.g. ("user_id", "eq.42")
Filter = Tuple[str, str]


@dataclass
class BackendConfig:
    url: str
    api_key: str
    timeout: float = 30.0


def eq(column: str, value: Any) -> Filter:
    return column, f"eq.{_literal(value)}"


def gte(column: str, value: Any) -> Filter:
    return column, f"gte.{_literal(value)}"


def lte(column: str, value: Any) -> Filter:
    return column, f"lte.{_literal(value)}"


def lt(column: str, value: Any) -> Filter:
    return column, f"lt.{_literal(value)}"


def in_(column: str, values: Sequence[Any]) -> Filter:
    return column, "in.(" + ",".join(_literal(v) for v in values) + ")"


def is_null(column: str) -> Filter:
    return column, "is.null"


def not_null(column: str) -> Filter:
    return column, "not.is.null"


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "value"):
        value = value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


class BackendClient:
    """Generic request/response client for the hosted backend.

    Rows are read and written through ``/rest/v1/<table>`` and named remote
    procedures are called through ``/rest/v1/rpc/<name>``. Every failure, from
    transport errors to 4xx/5xx answers, surfaces as a single ``BackendError``.
    """

    def __init__(self, config: BackendConfig, *, session: Optional[requests.Session] = None):
        self._config = config
        self._session = session or requests.Session()
        self._base = config.url.rstrip("/") + "/rest/v1"

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self._config.api_key,
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Prefer": "return=representation",
        }

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self._base}/{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            resp = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self._config.timeout,
            )
        except requests.RequestException as e:
            raise BackendError(f"Backend unreachable: {e}") from e

        if resp.status_code >= 400:
            raise self._error_from(resp)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise BackendError("Backend returned a non-JSON body", status=resp.status_code) from e

    @staticmethod
    def _error_from(resp) -> BackendError:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or body.get("error") or resp.text or f"HTTP {resp.status_code}"
        return BackendError(str(message), code=body.get("code"), status=resp.status_code)

    def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return matching rows. ``order`` items look like ``"date.desc"``."""
        params: List[Tuple[str, str]] = [("select", columns)]
        params.extend(filters)
        if order:
            params.append(("order", ",".join(order)))
        if limit is not None:
            params.append(("limit", str(int(limit))))
        return list(self._request("GET", table, params=params) or [])

    def select_one(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[Sequence[str]] = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            rows = self.select(table, columns=columns, filters=filters, order=order, limit=1)
        except BackendError as e:
            if e.code == NO_ROWS_CODE:
                return None
            raise
        return rows[0] if rows else None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._request("POST", table, json=values) or []
        if not rows:
            raise BackendError(f"Insert into {table} returned no row")
        return rows[0]

    def update(self, table: str, values: Dict[str, Any], *, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        if not filters:
            raise BackendError(f"Refusing unfiltered update on {table}")
        return list(self._request("PATCH", table, params=list(filters), json=values) or [])

    def delete(self, table: str, *, filters: Sequence[Filter]) -> List[Dict[str, Any]]:
        if not filters:
            raise BackendError(f"Refusing unfiltered delete on {table}")
        return list(self._request("DELETE", table, params=list(filters)) or [])

    def rpc(self, fn: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.info("rpc %s", fn)
        return self._request("POST", f"rpc/{fn}", json=params or {})
