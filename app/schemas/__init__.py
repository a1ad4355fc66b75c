"""Pydantic models and result types shared by the client and controllers."""

from app.schemas.repair_request import (
    NewRepairRequest, RepairRequest, Status, Urgency,
    STATUS_OPTIONS, URGENCY_OPTIONS, FLOOR_OPTIONS,
)
from app.schemas.envelope import ApiSuccess, ApiFailure, ApiResult, parse_envelope
from app.schemas.view import ViewType

__all__ = [
    "NewRepairRequest", "RepairRequest", "Status", "Urgency",
    "STATUS_OPTIONS", "URGENCY_OPTIONS", "FLOOR_OPTIONS",
    "ApiSuccess", "ApiFailure", "ApiResult", "parse_envelope",
    "ViewType",
]
