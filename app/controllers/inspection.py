"""Facility safety inspection screen. Not available yet."""

from __future__ import annotations


class InspectionController:
    title = "Facility safety inspection"
    notice = "This feature is in preparation."

    def snapshot(self) -> dict:
        return {"available": False, "title": self.title, "notice": self.notice}
