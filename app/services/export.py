"""Data export: repair request list -> xlsx workbook."""

from __future__ import annotations

import io
from datetime import date, datetime, timezone

from openpyxl import Workbook

from app.schemas.repair_request import RepairRequest

SHEET_TITLE = "보수현황"

# (header, attribute) in column order
COLUMNS: list[tuple[str, str]] = [
    ("ID", "id"),
    ("접수일", "submitted_date"),
    ("층", "floor"),
    ("장소", "location"),
    ("신청자", "applicant_name"),
    ("긴급도", "urgency"),
    ("상태", "status"),
    ("요청사항", "description"),
    ("관리자비고", "admin_note"),
]


def export_filename(today: date | None = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    return f"시설보수현황_{today.isoformat()}.xlsx"


def _cell(record: RepairRequest, attr: str):
    value = getattr(record, attr)
    return getattr(value, "value", value)


def export_requests_xlsx(requests: list[RepairRequest]) -> bytes:
    """Render requests as a single-sheet workbook, in the given order."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append([header for header, _ in COLUMNS])
    for record in requests:
        ws.append([_cell(record, attr) for _, attr in COLUMNS])

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
