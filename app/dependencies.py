"""FastAPI dependency providers for settings and per-visitor workspaces."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, Request, Response

from app.config import Settings, get_settings
from app.services.workspace import Workspace, WorkspaceManager


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


def get_workspace_manager(request: Request) -> WorkspaceManager:
    manager = getattr(request.app.state, "workspaces", None)
    if manager is None:
        raise HTTPException(503, "Repair sheet client is not configured")
    return manager


async def get_workspace(
    request: Request,
    response: Response,
    manager: WorkspaceManager = Depends(get_workspace_manager),
    settings: Settings = Depends(get_settings_dep),
) -> Workspace:
    """Resolve the caller's workspace from its cookie, creating one on first contact.

    The cookie has no max-age, so it lasts for the browser session only.
    """
    cookie_name = settings.ui.workspace_cookie
    ws, created = manager.get_or_create(request.cookies.get(cookie_name))
    if created:
        response.set_cookie(cookie_name, ws.id, httponly=True, samesite="lax")
    return ws
