"""Per-visitor workspaces: the controllers behind one browser session.

A workspace stands in for a browser tab. It owns the view state, the screen
controllers and the admin token storage; the manager evicts it once it sits idle
or the registry is full.
"""

from __future__ import annotations

import logging
import secrets
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable

from app.controllers.admin_dashboard import AdminDashboardController
from app.controllers.inspection import InspectionController
from app.controllers.request_form import RequestFormController
from app.controllers.status_check import StatusCheckController
from app.controllers.view_state import ViewStateController
from app.schemas.view import ViewType
from app.services.admin_session import AdminSession
from app.services.sheet_client import RepairSheetClient

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    id: str
    view: ViewStateController
    form: RequestFormController
    check: StatusCheckController
    inspection: InspectionController
    admin: AdminDashboardController
    storage: dict[str, str] = field(default_factory=dict)
    last_seen: float = 0.0

    @classmethod
    def create(cls, client: RepairSheetClient, workspace_id: str | None = None, message_ttl: float = 3.0) -> "Workspace":
        storage: dict[str, str] = {}
        view = ViewStateController()
        admin = AdminDashboardController(client, AdminSession(client, storage), message_ttl=message_ttl)
        ws = cls(
            id=workspace_id or secrets.token_urlsafe(24),
            view=view,
            form=RequestFormController(client, view.navigate),
            check=StatusCheckController(client),
            inspection=InspectionController(),
            admin=admin,
            storage=storage,
        )
        view.on_enter(ws._on_enter)
        return ws

    async def _on_enter(self, view: ViewType) -> None:
        if view == ViewType.ADMIN:
            await self.admin.activate()

    def snapshot(self) -> dict:
        screens = {
            ViewType.REQUEST: self.form,
            ViewType.CHECK: self.check,
            ViewType.INSPECTION: self.inspection,
            ViewType.ADMIN: self.admin,
        }
        active = self.view.active
        return {"view": active.value, "state": screens[active].snapshot()}


class WorkspaceManager:
    """In-memory registry of workspaces.

    Workspaces idle for longer than ``idle_seconds`` are dropped on the next
    lookup, and at most ``max_workspaces`` are held; the least recently used
    one goes first when the cap is reached.
    """

    def __init__(
        self,
        client: RepairSheetClient,
        message_ttl: float = 3.0,
        *,
        idle_seconds: float = 3600.0,
        max_workspaces: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.message_ttl = message_ttl
        self.idle_seconds = idle_seconds
        self.max_workspaces = max_workspaces
        self._clock = clock
        self._workspaces: OrderedDict[str, Workspace] = OrderedDict()

    def prune(self) -> int:
        """Drop idle workspaces. Returns how many were removed."""
        cutoff = self._clock() - self.idle_seconds
        stale = [wid for wid, ws in self._workspaces.items() if ws.last_seen < cutoff]
        for wid in stale:
            self.discard(wid)
        if stale:
            logger.info("Evicted %d idle workspaces", len(stale))
        return len(stale)

    def get(self, workspace_id: str | None) -> Workspace | None:
        if not workspace_id:
            return None
        ws = self._workspaces.get(workspace_id)
        if ws is not None:
            ws.last_seen = self._clock()
            self._workspaces.move_to_end(workspace_id)
        return ws

    def create(self) -> Workspace:
        while len(self._workspaces) >= self.max_workspaces:
            oldest, _ = self._workspaces.popitem(last=False)
            logger.info("Workspace limit reached; evicted %s", oldest)
        ws = Workspace.create(self.client, message_ttl=self.message_ttl)
        ws.last_seen = self._clock()
        self._workspaces[ws.id] = ws
        return ws

    def get_or_create(self, workspace_id: str | None) -> tuple[Workspace, bool]:
        """Return (workspace, created)."""
        self.prune()
        ws = self.get(workspace_id)
        if ws is not None:
            return ws, False
        return self.create(), True

    def discard(self, workspace_id: str) -> None:
        self._workspaces.pop(workspace_id, None)

    def __len__(self) -> int:
        return len(self._workspaces)
