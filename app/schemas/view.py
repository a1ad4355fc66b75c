from __future__ import annotations

from enum import Enum


class ViewType(str, Enum):
    REQUEST = "request"
    CHECK = "check"
    INSPECTION = "inspection"
    ADMIN = "admin"
