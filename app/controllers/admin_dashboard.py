"""Admin dashboard: login gate, request list, inline edits, delete, export.

Local state is updated from the values just sent once the remote confirms a
mutation; the list is not refetched. Concurrent admins can therefore see
stale rows until the next refresh.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from pydantic import ValidationError

from app.controllers.messages import FlashSlot, validation_message
from app.schemas.envelope import ApiFailure
from app.schemas.repair_request import EDITABLE_FIELDS, RepairRequest, Status, Urgency, sort_newest_first
from app.services.admin_session import AdminSession
from app.services.export import export_filename, export_requests_xlsx
from app.services.sheet_client import RepairSheetClient

logger = logging.getLogger(__name__)

EMPTY_PASSWORD_ERROR = "Please enter the password."
LOGIN_FAILED_ERROR = "Login failed."
SESSION_EXPIRED = "Your session has expired. Please log in again."
AUTH_EXPIRED = "Authentication has expired."


class AdminDashboardController:
    def __init__(
        self,
        client: RepairSheetClient,
        session: AdminSession,
        *,
        message_ttl: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self.session = session
        self.requests: list[RepairRequest] = []
        self.loading = False
        self.load_error = ""
        self.is_authenticating = False
        self.login_error = ""
        self.flash = FlashSlot(ttl=message_ttl, clock=clock)
        self.editing_id: int | None = None
        self.edit_buffer: dict[str, Any] | None = None
        self.viewing_id: int | None = None
        self.pending_delete_id: int | None = None

    # ── Session ───────────────────────────────────────────

    async def login(self, password: str) -> bool:
        if not password:
            self.login_error = EMPTY_PASSWORD_ERROR
            return False
        if self.is_authenticating:
            return False

        self.is_authenticating = True
        self.login_error = ""
        try:
            result = await self.session.login(password)
        finally:
            self.is_authenticating = False

        if not result.ok:
            self.login_error = result.message or LOGIN_FAILED_ERROR
            return False
        await self.refresh()
        return True

    def logout(self, reason: str | None = None) -> None:
        self.session.logout(reason)
        self.login_error = reason or ""
        self.requests = []
        self.load_error = ""
        self.edit_buffer = None
        self.editing_id = None
        self.viewing_id = None
        self.pending_delete_id = None

    async def activate(self) -> None:
        """Entering the admin screen fetches the list when logged in."""
        if self.session.is_active:
            await self.refresh()

    def _handle_failure(self, result: ApiFailure, text: str) -> None:
        if result.is_auth_failure:
            logger.info("Admin call rejected as unauthenticated: %s", result.message)
            self.logout(AUTH_EXPIRED)
        else:
            self.flash.error(text)

    # ── List ──────────────────────────────────────────────

    async def refresh(self) -> None:
        if not self.session.is_active:
            return
        self.loading = True
        self.load_error = ""
        self.flash.clear()
        try:
            result = await self._client.list_all(self.session.token)
        finally:
            self.loading = False

        if result.ok:
            self.requests = sort_newest_first(result.data)
        elif result.is_auth_failure:
            self.logout(SESSION_EXPIRED)
        else:
            self.load_error = f"Failed to load data: {result.message}"

    def find(self, request_id: int) -> RepairRequest:
        for record in self.requests:
            if record.id == request_id:
                return record
        raise KeyError(request_id)

    def _replace(self, record: RepairRequest) -> None:
        self.requests = [record if r.id == record.id else r for r in self.requests]

    # ── Mutations ─────────────────────────────────────────

    async def _apply_update(self, request_id: int, changes: dict[str, Any], success_text: str, failure_text: str) -> bool:
        record = self.find(request_id)
        if not self.session.is_active:
            return False
        result = await self._client.update(request_id, changes, self.session.token)
        if not result.ok:
            self._handle_failure(result, failure_text)
            return False
        self._replace(record.model_copy(update=changes))
        self.flash.success(success_text)
        return True

    async def change_status(self, request_id: int, status: Status | str) -> bool:
        status = Status(status)
        return await self._apply_update(
            request_id,
            {"status": status},
            f"Status changed to '{status.value}'.",
            "Status update failed.",
        )

    async def update_note(self, request_id: int, note: str) -> bool:
        return await self._apply_update(
            request_id, {"admin_note": note}, "Note saved.", "Saving the note failed."
        )

    def begin_edit(self, request_id: int) -> None:
        record = self.find(request_id)
        self.editing_id = request_id
        self.edit_buffer = record.model_dump()

    def edit_field(self, name: str, value: Any) -> None:
        if self.edit_buffer is None:
            raise RuntimeError("No request is being edited")
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Field cannot be edited: {name}")
        self.edit_buffer[name] = value

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.edit_buffer = None

    async def save_edit(self) -> bool:
        if self.edit_buffer is None or self.editing_id is None:
            return False
        original = self.find(self.editing_id)
        try:
            edited = RepairRequest.model_validate({**self.edit_buffer, "id": original.id})
        except ValidationError as e:
            self.flash.error(f"Invalid value: {validation_message(e)}")
            return False

        changes = {
            name: getattr(edited, name)
            for name in EDITABLE_FIELDS
            if getattr(edited, name) != getattr(original, name)
        }
        # Stored rows may carry free-form values; edits must pick a known choice.
        for name, choices in (("urgency", Urgency), ("status", Status)):
            if name in changes and not isinstance(changes[name], choices):
                self.flash.error(f"Invalid value: {name}")
                return False
        if not changes:
            self.cancel_edit()
            return True
        saved = await self._apply_update(original.id, changes, "Changes saved.", "Saving failed.")
        if saved:
            self.cancel_edit()
        return saved

    def view(self, request_id: int) -> RepairRequest:
        record = self.find(request_id)
        self.viewing_id = request_id
        return record

    def close_view(self) -> None:
        self.viewing_id = None

    def request_delete(self, request_id: int) -> None:
        self.find(request_id)
        self.pending_delete_id = request_id

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        request_id = self.pending_delete_id
        if request_id is None or not self.session.is_active:
            return False
        self.pending_delete_id = None
        result = await self._client.delete(request_id, self.session.token)
        if not result.ok:
            self._handle_failure(result, "Delete failed.")
            return False
        self.requests = [r for r in self.requests if r.id != request_id]
        if self.viewing_id == request_id:
            self.viewing_id = None
        self.flash.success(f"Request #{request_id} deleted.")
        return True

    # ── Export / rendering ────────────────────────────────

    def export(self) -> tuple[str, bytes] | None:
        if not self.requests:
            return None
        return export_filename(), export_requests_xlsx(self.requests)

    def snapshot(self) -> dict:
        if not self.session.is_active:
            return {
                "authenticated": False,
                "is_authenticating": self.is_authenticating,
                "login_error": self.login_error,
            }
        message = self.flash.current
        viewing = None
        if self.viewing_id is not None:
            try:
                viewing = self.find(self.viewing_id).model_dump(mode="json")
            except KeyError:
                self.viewing_id = None
        return {
            "authenticated": True,
            "requests": [r.model_dump(mode="json") for r in self.requests],
            "loading": self.loading,
            "load_error": self.load_error,
            "message": message.to_dict() if message else None,
            "editing_id": self.editing_id,
            "edit_buffer": _jsonable(self.edit_buffer),
            "viewing": viewing,
            "pending_delete_id": self.pending_delete_id,
        }


def _jsonable(buffer: dict[str, Any] | None) -> dict[str, Any] | None:
    if buffer is None:
        return None
    return {k: getattr(v, "value", v) for k, v in buffer.items()}
