"""Submit a handful of demo repair requests to the configured sheet.

Useful for trying the status lookup and the admin dashboard against a fresh
sheet. Each request goes through the same client the app uses.

Usage:
    SHEET_API_URL=... SHEET_API_SECRET_KEY=... python scripts/seed_requests.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import get_settings
from app.schemas.repair_request import NewRepairRequest, Urgency
from app.services.sheet_client import RepairSheetClient

DEMO_REQUESTS = [
    NewRepairRequest(floor="1층", location="1-3 교실", applicant_name="김민수",
                     urgency=Urgency.URGENT, description="Classroom door lock is broken"),
    NewRepairRequest(floor="2층", location="과학실", applicant_name="이지은",
                     urgency=Urgency.NORMAL, description="Two ceiling lights flicker"),
    NewRepairRequest(floor="3층", location="3-1 교실", applicant_name="김민수",
                     urgency=Urgency.LOW, description="Window blind cord is tangled"),
    NewRepairRequest(floor="체육관", location="창고", applicant_name="박서준",
                     urgency=Urgency.NORMAL, description="Basketball hoop net is torn",
                     admin_note="Replacement net on order"),
]


async def main():
    settings = get_settings()
    if not settings.sheet_api.url:
        print("SHEET_API_URL is not set")
        sys.exit(1)

    async with RepairSheetClient.from_config(settings.sheet_api) as client:
        for draft in DEMO_REQUESTS:
            result = await client.submit(draft)
            if result.ok:
                print(f"  Submitted: {draft.applicant_name} / {draft.location}")
            else:
                print(f"  FAILED: {draft.applicant_name} / {draft.location}: {result.message}")

    print(f"\nDone. Try: python -m app.cli search {DEMO_REQUESTS[0].applicant_name}")


if __name__ == "__main__":
    asyncio.run(main())
