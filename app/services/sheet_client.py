"""HTTP client for the repair-request sheet endpoint.

The endpoint is a single static URL (an Apps Script web app). Reads are GET
requests with query parameters, writes are POSTs whose JSON body carries an
``action`` discriminator. Every response is a ``{success, data|message}``
envelope; see ``app.schemas.envelope``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from typing import Any, Callable

import httpx
from pydantic import ValidationError

from app.config import SheetApiConfig
from app.schemas.envelope import ApiFailure, ApiResult, ApiSuccess, parse_envelope
from app.schemas.repair_request import NewRepairRequest, RepairRequest, Status, wire_updates

logger = logging.getLogger(__name__)

# Sent as text/plain so browsers skip the CORS preflight; the endpoint
# parses the body as JSON regardless.
_POST_HEADERS = {"Content-Type": "text/plain;charset=utf-8"}


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


class RepairSheetClient:
    """Async client for login, list, search, submit, update and delete."""

    def __init__(
        self,
        url: str,
        secret_key: str = "",
        *,
        timeout: float = 15.0,
        http: httpx.AsyncClient | None = None,
        today: Callable[[], date] = _utc_today,
    ):
        self.url = url
        self.secret_key = secret_key
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._today = today

    @classmethod
    def from_config(cls, config: SheetApiConfig, **kwargs) -> "RepairSheetClient":
        return cls(config.url, config.secret_key, timeout=config.timeout_seconds, **kwargs)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "RepairSheetClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # ── Transport ─────────────────────────────────────────

    async def _call(self, method: str, *, params: dict | None = None, payload: dict | None = None):
        """Perform one exchange. Returns (result, decoded body or None)."""
        action = (payload or params or {}).get("action", "list")
        try:
            if method == "GET":
                response = await self._http.get(self.url, params=params)
            else:
                response = await self._http.post(
                    self.url, content=json.dumps(payload), headers=_POST_HEADERS
                )
        except httpx.HTTPError as e:
            logger.warning("Sheet %s request failed: %s", action, e)
            return ApiFailure(f"Network error: {e}", transport=True), None

        if not response.is_success:
            logger.warning("Sheet %s returned HTTP %s", action, response.status_code)
            return ApiFailure(
                f"Network error: {response.status_code}",
                transport=True,
                status_code=response.status_code,
            ), None

        try:
            body = response.json()
        except ValueError:
            logger.warning("Sheet %s returned a non-JSON body", action)
            return ApiFailure(
                "Malformed response from repair sheet",
                transport=True,
                status_code=response.status_code,
            ), None

        result = parse_envelope(body)
        if result.ok:
            logger.debug("Sheet %s succeeded", action)
        else:
            logger.warning("Sheet %s failed: %s", action, result.message)
        return result, body

    async def _get(self, params: dict) -> ApiResult[Any]:
        params = {**params, "secretKey": self.secret_key}
        result, _ = await self._call("GET", params=params)
        return result

    async def _post(self, payload: dict) -> ApiResult[Any]:
        payload = {**payload, "secretKey": self.secret_key}
        result, _ = await self._call("POST", payload=payload)
        return result

    @staticmethod
    def _records(result: ApiResult[Any]) -> ApiResult[list[RepairRequest]]:
        if not result.ok:
            return result
        rows = result.data or []
        if not isinstance(rows, list):
            logger.warning("Sheet returned %s instead of a row list", type(rows).__name__)
            return ApiFailure("Malformed response from repair sheet", transport=True)

        records = []
        for row in rows:
            try:
                records.append(RepairRequest.model_validate(row))
            except ValidationError as e:
                # One unreadable row (e.g. a blank ID) must not hide the rest.
                logger.warning("Skipping sheet row that is not a repair request: %s", e)
        return ApiSuccess(records)

    # ── Operations ────────────────────────────────────────

    async def login(self, password: str) -> ApiResult[str]:
        """Exchange the admin password for a session token."""
        payload = {"action": "login", "password": password, "secretKey": self.secret_key}
        result, body = await self._call("POST", payload=payload)
        if not result.ok:
            return result

        data = result.data
        token = None
        if isinstance(data, dict):
            token = data.get("token")
        elif isinstance(data, str):
            token = data
        if not token and isinstance(body, dict):
            token = body.get("token")
        if not token:
            return ApiFailure("Login response did not include a session token")
        return ApiSuccess(token)

    async def list_all(self, token: str | None = None) -> ApiResult[list[RepairRequest]]:
        params = {}
        if token is not None:
            params["token"] = token
        return self._records(await self._get(params))

    async def search_by_name(self, name: str) -> ApiResult[list[RepairRequest]]:
        return self._records(await self._get({"action": "search", "name": name}))

    async def submit(self, new_request: NewRepairRequest) -> ApiResult[Any]:
        """Create a request. The date and initial status are set here."""
        payload = {
            **new_request.to_wire(),
            "action": "submit",
            "날짜": self._today().isoformat(),
            "상태": Status.RECEIVED.value,
        }
        result = await self._post(payload)
        if result.ok and isinstance(result.data, dict):
            try:
                return ApiSuccess(RepairRequest.model_validate(result.data))
            except ValidationError:
                pass  # an acknowledgement, not a record
        return result

    async def update(self, request_id: int, updates: dict[str, Any], token: str | None = None) -> ApiResult[Any]:
        """Merge ``updates`` (attribute names) onto the stored record."""
        return await self._post({
            "action": "update",
            "id": request_id,
            "updates": wire_updates(updates),
            "token": token,
        })

    async def delete(self, request_id: int, token: str | None = None) -> ApiResult[Any]:
        return await self._post({"action": "delete", "id": request_id, "token": token})
