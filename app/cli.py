"""CLI for the facility repair desk: look up, submit, and export requests."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

from app.config import get_settings
from app.schemas.repair_request import NewRepairRequest, Urgency, sort_newest_first
from app.services.errors import SheetClientError
from app.services.export import export_filename, export_requests_xlsx
from app.services.sheet_client import RepairSheetClient


def _client() -> RepairSheetClient:
    settings = get_settings()
    if not settings.sheet_api.url:
        print("ERROR: SHEET_API_URL is not configured (config.yaml or environment).")
        sys.exit(1)
    return RepairSheetClient.from_config(settings.sheet_api)


async def cmd_search(args):
    """Print every request filed under an applicant name."""
    async with _client() as client:
        records = sort_newest_first((await client.search_by_name(args.name)).unwrap())

    if not records:
        print(f"No requests found for {args.name}")
        return
    for r in records:
        print(f"#{r.id}  {r.submitted_date}  {r.floor} {r.location}  [{getattr(r.status, 'value', r.status)}]  {r.description}")


async def cmd_submit(args):
    """Submit a new repair request."""
    draft = NewRepairRequest(
        floor=args.floor,
        location=args.location,
        applicant_name=args.name,
        urgency=Urgency(args.urgency),
        description=args.description,
        admin_note=args.note,
    )
    async with _client() as client:
        created = (await client.submit(draft)).unwrap()

    if hasattr(created, "id"):
        print(f"Request submitted: #{created.id} ({getattr(created.status, 'value', created.status)})")
    else:
        print("Request submitted")


async def cmd_export(args):
    """Log in as admin and write the full request list to an xlsx file."""
    password = args.password or getpass.getpass("Admin password: ")
    async with _client() as client:
        token = (await client.login(password)).unwrap()
        records = sort_newest_first((await client.list_all(token)).unwrap())

    if not records:
        print("No requests to export")
        return
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename()
    path.write_bytes(export_requests_xlsx(records))
    print(f"Exported {len(records)} requests to {path}")


def main():
    parser = argparse.ArgumentParser(description="Facility Repair Desk CLI")
    subparsers = parser.add_subparsers(dest="command")

    # search
    sr = subparsers.add_parser("search", help="Look up requests by applicant name")
    sr.add_argument("name", help="Applicant name (exact match)")

    # submit
    sb = subparsers.add_parser("submit", help="Submit a repair request")
    sb.add_argument("--floor", required=True, help="Floor or area, e.g. 2층")
    sb.add_argument("--location", required=True, help="Room or location name")
    sb.add_argument("--name", required=True, help="Applicant name")
    sb.add_argument("--urgency", default=Urgency.NORMAL.value, choices=[u.value for u in Urgency])
    sb.add_argument("--description", required=True, help="What needs repairing")
    sb.add_argument("--note", default="", help="Additional note")

    # export
    ex = subparsers.add_parser("export", help="Export all requests to Excel (admin)")
    ex.add_argument("--password", default="", help="Admin password (prompted if not given)")
    ex.add_argument("--out", default=".", help="Output directory")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {"search": cmd_search, "submit": cmd_submit, "export": cmd_export}
    try:
        asyncio.run(commands[args.command](args))
    except SheetClientError as e:
        print(f"ERROR: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
