"""Public status lookup by applicant name."""

from __future__ import annotations

import logging

from app.schemas.repair_request import RepairRequest, sort_newest_first
from app.services.sheet_client import RepairSheetClient

logger = logging.getLogger(__name__)

EMPTY_NAME_ERROR = "Please enter the applicant name."
SEARCH_FAILED_ERROR = "Could not load requests. Please try again shortly."


class StatusCheckController:
    def __init__(self, client: RepairSheetClient):
        self._client = client
        self.name = ""
        self.results: list[RepairRequest] = []
        self.loading = False
        self.error = ""
        # Distinguishes "no matches" from "not searched yet".
        self.searched = False

    async def search(self, name: str | None = None) -> None:
        if name is not None:
            self.name = name
        if not self.name.strip():
            self.error = EMPTY_NAME_ERROR
            self.results = []
            self.searched = False
            return

        self.loading = True
        self.error = ""
        self.searched = True
        try:
            result = await self._client.search_by_name(self.name)
        finally:
            self.loading = False

        if result.ok:
            self.results = sort_newest_first(result.data)
        else:
            logger.warning("Status lookup failed: %s", result.message)
            self.error = SEARCH_FAILED_ERROR
            self.results = []

    @property
    def no_results(self) -> bool:
        return self.searched and not self.loading and not self.results

    def snapshot(self) -> dict:
        return {
            "name": self.name,
            "results": [r.model_dump(mode="json") for r in self.results],
            "loading": self.loading,
            "error": self.error,
            "searched": self.searched,
            "no_results": self.no_results,
        }
