"""Public repair-request form: draft, validation, submission, confirmation."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from app.schemas.repair_request import REQUIRED_FIELDS, NewRepairRequest
from app.schemas.view import ViewType
from app.services.sheet_client import RepairSheetClient

logger = logging.getLogger(__name__)

MISSING_FIELDS_ERROR = "Please fill in all required fields (floor, location, applicant name, description)."
SUBMIT_FAILED_ERROR = "The request could not be submitted. Please try again shortly."


class RequestFormController:
    def __init__(self, client: RepairSheetClient, navigate: Callable[[ViewType], Awaitable[Any]]):
        self._client = client
        self._navigate = navigate
        self.draft = NewRepairRequest()
        self.is_submitting = False
        self.submitted = False
        self.created: Any = None
        self.error = ""

    def set_field(self, name: str, value: Any) -> None:
        if name not in NewRepairRequest.model_fields:
            raise ValueError(f"Unknown form field: {name}")
        self.update({name: value})

    def update(self, fields: dict[str, Any]) -> None:
        """Merge fields into the draft, validating types (e.g. urgency)."""
        merged = {**self.draft.model_dump(), **fields}
        self.draft = NewRepairRequest.model_validate(merged)

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self.draft, name).strip()]

    async def submit(self) -> bool:
        """Send the draft once. Returns True when the remote accepted it."""
        if self.is_submitting:
            return False
        self.error = ""
        if self.missing_fields():
            self.error = MISSING_FIELDS_ERROR
            return False

        self.is_submitting = True
        try:
            result = await self._client.submit(self.draft)
        finally:
            self.is_submitting = False

        if not result.ok:
            logger.warning("Repair request submission failed: %s", result.message)
            self.error = SUBMIT_FAILED_ERROR
            return False

        self.created = result.data
        self.submitted = True
        return True

    def start_new(self) -> None:
        """Leave the confirmation state with an empty draft."""
        self.draft = NewRepairRequest()
        self.submitted = False
        self.created = None
        self.error = ""

    async def go_to_check(self) -> None:
        await self._navigate(ViewType.CHECK)

    def snapshot(self) -> dict:
        created = self.created
        if hasattr(created, "model_dump"):
            created = created.model_dump(mode="json")
        return {
            "draft": self.draft.model_dump(mode="json"),
            "is_submitting": self.is_submitting,
            "submitted": self.submitted,
            "created": created,
            "error": self.error,
        }
