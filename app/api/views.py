"""Top-level navigation and the inspection stub."""

from __future__ import annotations

from pydantic import BaseModel
from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_workspace
from app.services.workspace import Workspace

router = APIRouter(prefix="/api", tags=["views"])


class NavigateRequest(BaseModel):
    view: str


@router.get("/state")
async def get_state(ws: Workspace = Depends(get_workspace)):
    return ws.snapshot()


@router.post("/view")
async def navigate(body: NavigateRequest, ws: Workspace = Depends(get_workspace)):
    try:
        await ws.view.navigate(body.view)
    except ValueError:
        raise HTTPException(422, f"Unknown view: {body.view}")
    return ws.snapshot()


@router.get("/inspection")
async def inspection(ws: Workspace = Depends(get_workspace)):
    return ws.inspection.snapshot()
