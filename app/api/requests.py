"""Public screens: the repair request form and the status lookup."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError
from fastapi import APIRouter, Depends, HTTPException

from app.controllers.messages import validation_message
from app.dependencies import get_workspace
from app.services.workspace import Workspace

router = APIRouter(prefix="/api", tags=["requests"])


class SearchRequest(BaseModel):
    name: str = ""


# ── Request form ──────────────────────────────────────────

@router.put("/request/draft")
async def update_draft(body: dict[str, Any], ws: Workspace = Depends(get_workspace)):
    try:
        for name, value in body.items():
            ws.form.set_field(name, value)
    except ValidationError as e:
        raise HTTPException(422, validation_message(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return ws.form.snapshot()


@router.post("/request/submit")
async def submit_request(ws: Workspace = Depends(get_workspace)):
    await ws.form.submit()
    return ws.form.snapshot()


@router.post("/request/new")
async def new_request(ws: Workspace = Depends(get_workspace)):
    ws.form.start_new()
    return ws.form.snapshot()


@router.post("/request/check")
async def go_to_check(ws: Workspace = Depends(get_workspace)):
    await ws.form.go_to_check()
    return ws.snapshot()


# ── Status check ──────────────────────────────────────────

@router.post("/check/search")
async def search(body: SearchRequest, ws: Workspace = Depends(get_workspace)):
    await ws.check.search(body.name)
    return ws.check.snapshot()
