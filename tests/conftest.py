"""Shared fixtures: an in-memory stand-in for the remote repair sheet."""

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest_asyncio

from app.schemas.repair_request import RepairRequest
from app.services.sheet_client import RepairSheetClient

SHEET_URL = "https://sheet.test/exec"
SECRET = "test-secret"
ADMIN_PASSWORD = "admin-pass"
TODAY = date(2025, 3, 14)

EXPIRED_MESSAGE = "인증 세션이 만료되었습니다."


def make_row(request_id: int, name: str = "Jane", status: str = "접수 중", **extra) -> dict:
    row = {
        "ID": request_id,
        "날짜": "2025-03-01",
        "층": "2층",
        "교실명": "Room 5",
        "신청자 성명": name,
        "수리 긴급 여부": "보통",
        "요청사항": f"request {request_id}",
        "비고": "",
        "상태": status,
    }
    # Extra cells may be given by column header or by attribute name.
    for key, value in extra.items():
        field = RepairRequest.model_fields.get(key)
        row[field.alias if field else key] = value
    return row


class FakeSheet:
    """Mimics the Apps Script endpoint: envelope responses, tokens, rows."""

    password = ADMIN_PASSWORD
    expired_message = EXPIRED_MESSAGE

    def __init__(self):
        self.rows: list[dict] = []
        self.next_id = 1
        self.tokens: set[str] = set()
        self.calls: list[tuple[str, dict]] = []
        self.http_status: int | None = None

    def add(self, row: dict) -> dict:
        self.rows.append(row)
        self.next_id = max(self.next_id, row["ID"] + 1)
        return row

    def add_row(self, request_id: int, **kwargs) -> dict:
        return self.add(make_row(request_id, **kwargs))

    def issue_token(self) -> str:
        token = f"tok-{len(self.tokens) + 1}"
        self.tokens.add(token)
        return token

    def expire_all(self) -> None:
        self.tokens.clear()

    def actions(self) -> list[str]:
        return [action for action, _ in self.calls]

    def _find(self, request_id) -> dict | None:
        for row in self.rows:
            if row["ID"] == request_id:
                return row
        return None

    @staticmethod
    def _ok(data=None) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": data})

    @staticmethod
    def _fail(message: str) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "message": message})

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            body = dict(request.url.params)
        else:
            body = json.loads(request.content)
        action = body.get("action", "list")
        self.calls.append((action, body))

        if self.http_status is not None:
            return httpx.Response(self.http_status, text="upstream error")
        if body.get("secretKey") != SECRET:
            return self._fail("Invalid secret key")

        if action == "login":
            if body.get("password") != ADMIN_PASSWORD:
                return self._fail("비밀번호가 올바르지 않습니다.")
            return self._ok({"success": True, "token": self.issue_token()})

        if action == "search":
            return self._ok([row for row in self.rows if row["신청자 성명"] == body.get("name")])

        if action == "submit":
            row = {k: v for k, v in body.items() if k not in ("action", "secretKey")}
            row["ID"] = self.next_id
            self.next_id += 1
            self.rows.append(row)
            return self._ok(dict(row))

        # Everything below needs a valid session token.
        if body.get("token") not in self.tokens:
            return self._fail(EXPIRED_MESSAGE)

        if action == "list":
            return self._ok([dict(row) for row in self.rows])

        row = self._find(body.get("id"))
        if row is None:
            return self._fail("해당 ID를 찾을 수 없습니다.")
        if action == "update":
            row.update(body.get("updates", {}))
            return self._ok(dict(row))
        if action == "delete":
            self.rows.remove(row)
            return self._ok({"deleted": body.get("id")})
        return self._fail(f"Unknown action: {action}")


@pytest_asyncio.fixture
async def sheet():
    return FakeSheet()


@pytest_asyncio.fixture
async def client(sheet):
    http = httpx.AsyncClient(transport=httpx.MockTransport(sheet.handler))
    yield RepairSheetClient(SHEET_URL, SECRET, http=http, today=lambda: TODAY)
    await http.aclose()
