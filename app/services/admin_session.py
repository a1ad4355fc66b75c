"""Admin session: one token per workspace, dropped when a call reports it expired."""

from __future__ import annotations

import logging
from typing import MutableMapping

from app.schemas.envelope import ApiResult
from app.services.sheet_client import RepairSheetClient

logger = logging.getLogger(__name__)

TOKEN_STORAGE_KEY = "admin_session_token"


class AdminSession:
    """Holds at most one admin token in the workspace's storage.

    There is no local expiry timer. Callers that see an auth-shaped failure
    call ``logout(reason)``.
    """

    def __init__(self, client: RepairSheetClient, storage: MutableMapping[str, str] | None = None):
        self._client = client
        self._storage = storage if storage is not None else {}
        self.logout_reason: str | None = None

    @property
    def token(self) -> str | None:
        return self._storage.get(TOKEN_STORAGE_KEY)

    @property
    def is_active(self) -> bool:
        return bool(self.token)

    async def login(self, password: str) -> ApiResult[str]:
        result = await self._client.login(password)
        if result.ok:
            self._storage[TOKEN_STORAGE_KEY] = result.data
            self.logout_reason = None
            logger.info("Admin session started")
        return result

    def logout(self, reason: str | None = None) -> None:
        if self._storage.pop(TOKEN_STORAGE_KEY, None) is not None:
            logger.info("Admin session ended%s", f": {reason}" if reason else "")
        self.logout_reason = reason
