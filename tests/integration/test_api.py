"""Integration tests for API endpoints."""

from __future__ import annotations

import io

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from openpyxl import load_workbook

from app.dependencies import get_settings_dep, get_workspace_manager
from app.main import app
from app.services.workspace import WorkspaceManager

_DRAFT = {
    "floor": "2F",
    "location": "Room 5",
    "applicant_name": "Jane",
    "urgency": "보통",
    "description": "broken chair",
}


@pytest_asyncio.fixture
async def manager(client):
    return WorkspaceManager(client)


@pytest_asyncio.fixture
async def api(manager):
    """HTTP client against the app, with workspaces backed by the fake sheet."""
    app.dependency_overrides[get_workspace_manager] = lambda: manager
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _admin(api, sheet):
    r = await api.post("/api/view", json={"view": "admin"})
    assert r.json()["state"]["authenticated"] is False
    r = await api.post("/api/admin/login", json={"password": sheet.password})
    assert r.status_code == 200
    return r.json()


@pytest.mark.asyncio
async def test_first_contact_creates_one_workspace(api, manager):
    r = await api.get("/api/state")
    assert r.status_code == 200
    assert r.json()["view"] == "request"
    cookie = get_settings_dep().ui.workspace_cookie
    assert cookie in r.cookies

    await api.get("/api/state")
    assert len(manager) == 1


@pytest.mark.asyncio
async def test_submit_then_check_status(api, sheet):
    r = await api.put("/api/request/draft", json=_DRAFT)
    assert r.json()["draft"]["applicant_name"] == "Jane"

    r = await api.post("/api/request/submit")
    data = r.json()
    assert data["submitted"] is True
    assert data["created"]["status"] == "접수 중"
    assert data["created"]["submitted_date"] == "2025-03-14"

    r = await api.post("/api/request/check")
    assert r.json()["view"] == "check"

    r = await api.post("/api/check/search", json={"name": "Jane"})
    results = r.json()["results"]
    assert [x["id"] for x in results] == [data["created"]["id"]]


@pytest.mark.asyncio
async def test_submit_with_missing_fields_is_local(api, sheet):
    await api.put("/api/request/draft", json={"floor": "2F"})
    r = await api.post("/api/request/submit")
    assert r.json()["submitted"] is False
    assert r.json()["error"]
    assert sheet.calls == []


@pytest.mark.asyncio
async def test_draft_rejects_bad_fields(api):
    r = await api.put("/api/request/draft", json={"status": "수리 완료"})
    assert r.status_code == 400
    r = await api.put("/api/request/draft", json={"urgency": "whenever"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_empty_search_is_rejected_locally(api, sheet):
    r = await api.post("/api/check/search", json={"name": ""})
    assert r.json()["searched"] is False
    assert r.json()["error"]
    assert sheet.calls == []


@pytest.mark.asyncio
async def test_unknown_view(api):
    r = await api.post("/api/view", json={"view": "settings"})
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_inspection_stub(api):
    r = await api.post("/api/view", json={"view": "inspection"})
    assert r.json()["state"]["available"] is False
    r = await api.get("/api/inspection")
    assert r.json()["available"] is False


@pytest.mark.asyncio
async def test_admin_view_without_login_does_not_fetch(api, sheet):
    r = await api.post("/api/view", json={"view": "admin"})
    assert r.json()["view"] == "admin"
    assert r.json()["state"]["authenticated"] is False
    assert sheet.calls == []


@pytest.mark.asyncio
async def test_admin_wrong_password(api, sheet):
    r = await api.post("/api/admin/login", json={"password": "wrong"})
    data = r.json()
    assert data["authenticated"] is False
    assert data["login_error"]
    assert "list" not in sheet.actions()


@pytest.mark.asyncio
async def test_admin_list_and_status_change(api, sheet):
    for request_id in (3, 1, 4, 1, 5):
        sheet.add_row(request_id)
    data = await _admin(api, sheet)
    assert data["authenticated"] is True
    assert [x["id"] for x in data["requests"]] == [5, 4, 3, 1, 1]

    r = await api.put("/api/admin/requests/4/status", json={"status": "completed"})
    data = r.json()
    row = next(x for x in data["requests"] if x["id"] == 4)
    assert row["status"] == "수리 완료"
    assert data["message"]["type"] == "success"


@pytest.mark.asyncio
async def test_admin_status_errors(api, sheet):
    sheet.add_row(1)
    await _admin(api, sheet)
    r = await api.put("/api/admin/requests/99/status", json={"status": "수리 중"})
    assert r.status_code == 404
    r = await api.put("/api/admin/requests/1/status", json={"status": "lost"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_admin_expired_session_logs_out(api, sheet):
    sheet.add_row(7)
    await _admin(api, sheet)
    sheet.expire_all()

    r = await api.put("/api/admin/requests/7/status", json={"status": "completed"})
    data = r.json()
    assert data["authenticated"] is False
    assert data["login_error"]
    assert sheet.rows[0]["상태"] == "접수 중"


@pytest.mark.asyncio
async def test_admin_edit_and_delete(api, sheet):
    sheet.add_row(1)
    sheet.add_row(2)
    await _admin(api, sheet)

    r = await api.post("/api/admin/requests/2/edit")
    assert r.json()["editing_id"] == 2
    await api.put("/api/admin/edit", json={"admin_note": "parts ordered"})
    r = await api.post("/api/admin/edit/save")
    assert r.json()["edit_buffer"] is None
    assert sheet.rows[1]["비고"] == "parts ordered"

    r = await api.post("/api/admin/requests/1/delete")
    assert r.json()["pending_delete_id"] == 1
    r = await api.post("/api/admin/delete/confirm")
    assert [x["id"] for x in r.json()["requests"]] == [2]


@pytest.mark.asyncio
async def test_edit_without_buffer_conflicts(api, sheet):
    await _admin(api, sheet)
    r = await api.put("/api/admin/edit", json={"admin_note": "x"})
    assert r.status_code == 409


@pytest.mark.asyncio
async def test_export_requires_login(api):
    r = await api.get("/api/admin/export")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_export_download(api, sheet):
    sheet.add_row(1)
    await _admin(api, sheet)
    r = await api.get("/api/admin/export")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "attachment" in r.headers["content-disposition"]
    ws = load_workbook(io.BytesIO(r.content)).active
    assert ws.max_row == 2


@pytest.mark.asyncio
async def test_export_with_empty_list(api, sheet):
    await _admin(api, sheet)
    r = await api.get("/api/admin/export")
    assert r.status_code == 404
