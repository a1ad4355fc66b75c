"""Admin API: session, request list, inline edits, delete, Excel export."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from pydantic import BaseModel
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app.dependencies import get_workspace
from app.schemas.repair_request import Status
from app.services.workspace import Workspace

router = APIRouter(prefix="/api/admin", tags=["admin"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ── Schemas ───────────────────────────────────────────────

class LoginRequest(BaseModel):
    password: str = ""


class StatusUpdate(BaseModel):
    status: str


class NoteUpdate(BaseModel):
    note: str = ""


def _parse_status(value: str) -> Status:
    """Accept the sheet value ("수리 중") or the member name ("in-progress")."""
    try:
        return Status(value)
    except ValueError:
        pass
    try:
        return Status[value.strip().upper().replace("-", "_").replace(" ", "_")]
    except KeyError:
        raise HTTPException(400, f"Invalid status: {value}")


def _require_loaded(ws: Workspace, request_id: int) -> None:
    try:
        ws.admin.find(request_id)
    except KeyError:
        raise HTTPException(404, "Request not found")


# ── Session ───────────────────────────────────────────────

@router.post("/login")
async def login(body: LoginRequest, ws: Workspace = Depends(get_workspace)):
    await ws.admin.login(body.password)
    return ws.admin.snapshot()


@router.post("/logout")
async def logout(ws: Workspace = Depends(get_workspace)):
    ws.admin.logout()
    return ws.admin.snapshot()


@router.post("/refresh")
async def refresh(ws: Workspace = Depends(get_workspace)):
    await ws.admin.refresh()
    return ws.admin.snapshot()


# ── Inline mutations ──────────────────────────────────────

@router.put("/requests/{request_id}/status")
async def change_status(request_id: int, body: StatusUpdate, ws: Workspace = Depends(get_workspace)):
    status = _parse_status(body.status)
    _require_loaded(ws, request_id)
    await ws.admin.change_status(request_id, status)
    return ws.admin.snapshot()


@router.put("/requests/{request_id}/note")
async def update_note(request_id: int, body: NoteUpdate, ws: Workspace = Depends(get_workspace)):
    _require_loaded(ws, request_id)
    await ws.admin.update_note(request_id, body.note)
    return ws.admin.snapshot()


@router.post("/requests/{request_id}/view")
async def view_request(request_id: int, ws: Workspace = Depends(get_workspace)):
    _require_loaded(ws, request_id)
    ws.admin.view(request_id)
    return ws.admin.snapshot()


@router.delete("/view")
async def close_view(ws: Workspace = Depends(get_workspace)):
    ws.admin.close_view()
    return ws.admin.snapshot()


# ── Edit buffer ───────────────────────────────────────────

@router.post("/requests/{request_id}/edit")
async def begin_edit(request_id: int, ws: Workspace = Depends(get_workspace)):
    _require_loaded(ws, request_id)
    ws.admin.begin_edit(request_id)
    return ws.admin.snapshot()


@router.put("/edit")
async def edit_fields(body: dict[str, Any], ws: Workspace = Depends(get_workspace)):
    try:
        for name, value in body.items():
            ws.admin.edit_field(name, value)
    except RuntimeError as e:
        raise HTTPException(409, str(e))
    except ValueError as e:
        raise HTTPException(400, str(e))
    return ws.admin.snapshot()


@router.post("/edit/save")
async def save_edit(ws: Workspace = Depends(get_workspace)):
    await ws.admin.save_edit()
    return ws.admin.snapshot()


@router.delete("/edit")
async def cancel_edit(ws: Workspace = Depends(get_workspace)):
    ws.admin.cancel_edit()
    return ws.admin.snapshot()


# ── Delete (two-step) ─────────────────────────────────────

@router.post("/requests/{request_id}/delete")
async def request_delete(request_id: int, ws: Workspace = Depends(get_workspace)):
    _require_loaded(ws, request_id)
    ws.admin.request_delete(request_id)
    return ws.admin.snapshot()


@router.post("/delete/confirm")
async def confirm_delete(ws: Workspace = Depends(get_workspace)):
    await ws.admin.confirm_delete()
    return ws.admin.snapshot()


@router.delete("/delete")
async def cancel_delete(ws: Workspace = Depends(get_workspace)):
    ws.admin.cancel_delete()
    return ws.admin.snapshot()


# ── Export ────────────────────────────────────────────────

@router.get("/export")
async def export_xlsx(ws: Workspace = Depends(get_workspace)):
    if not ws.admin.session.is_active:
        raise HTTPException(401, "Not authenticated")
    exported = ws.admin.export()
    if exported is None:
        raise HTTPException(404, "No requests to export")

    filename, data = exported
    return Response(
        content=data,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )
