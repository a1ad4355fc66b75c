"""Repair request records as stored in the remote sheet.

Attribute names are English; aliases are the sheet's column headers, which
are also the keys used on the wire.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Urgency(str, Enum):
    URGENT = "긴급"
    NORMAL = "보통"
    LOW = "여유"


class Status(str, Enum):
    RECEIVED = "접수 중"
    IN_PROGRESS = "수리 중"
    COMPLETED = "수리 완료"
    ON_HOLD = "보류"


URGENCY_OPTIONS: list[Urgency] = [Urgency.URGENT, Urgency.NORMAL, Urgency.LOW]
# Choices offered in the admin drop-down. Any Status is accepted on update.
STATUS_OPTIONS: list[Status] = [Status.IN_PROGRESS, Status.COMPLETED, Status.ON_HOLD]
FLOOR_OPTIONS: list[str] = ["1층", "2층", "3층", "4층", "5층", "운동장", "체육관", "기타"]


class NewRepairRequest(BaseModel):
    floor: str = Field("", alias="층")
    location: str = Field("", alias="교실명")
    applicant_name: str = Field("", alias="신청자 성명")
    urgency: Urgency = Field(Urgency.NORMAL, alias="수리 긴급 여부")
    description: str = Field("", alias="요청사항")
    admin_note: str = Field("", alias="비고")

    # Sheets hands back numeric-looking cells (a room "201") as JSON numbers.
    model_config = {"populate_by_name": True, "coerce_numbers_to_str": True}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class RepairRequest(NewRepairRequest):
    """A stored row. Hand-typed urgency or status cells outside the known
    choices are kept as plain strings rather than rejecting the row."""

    id: int = Field(alias="ID")
    submitted_date: str = Field("", alias="날짜")
    urgency: Urgency | str = Field(Urgency.NORMAL, alias="수리 긴급 여부", union_mode="left_to_right")
    status: Status | str = Field(Status.RECEIVED, alias="상태", union_mode="left_to_right")


REQUIRED_FIELDS: tuple[str, ...] = ("floor", "location", "applicant_name", "description")
# Everything but the id may be changed through the admin edit buffer.
EDITABLE_FIELDS: tuple[str, ...] = tuple(
    name for name in RepairRequest.model_fields if name != "id"
)


def wire_updates(updates: dict[str, Any]) -> dict[str, Any]:
    """Translate attribute-named updates into sheet column keys."""
    fields = RepairRequest.model_fields
    out: dict[str, Any] = {}
    for name, value in updates.items():
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Field cannot be updated: {name}")
        if isinstance(value, Enum):
            value = value.value
        out[fields[name].alias] = value
    return out


def sort_newest_first(requests: list[RepairRequest]) -> list[RepairRequest]:
    """Order by id descending; equal ids keep their fetched order."""
    return sorted(requests, key=lambda r: r.id, reverse=True)
