"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.router import api_router
from app.config import get_settings
from app.services.sheet_client import RepairSheetClient
from app.services.workspace import WorkspaceManager

logger = logging.getLogger(__name__)

_settings = get_settings()
logging.basicConfig(level=_settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not _settings.sheet_api.url:
        logger.warning("SHEET_API_URL is not set; calls to the repair sheet will fail")

    client = RepairSheetClient.from_config(_settings.sheet_api)
    app.state.workspaces = WorkspaceManager(
        client,
        message_ttl=_settings.ui.message_ttl_seconds,
        idle_seconds=_settings.ui.workspace_idle_seconds,
        max_workspaces=_settings.ui.max_workspaces,
    )
    yield
    await client.aclose()


app = FastAPI(
    title="Facility Repair Desk",
    description="Repair request intake, status lookup, and admin dashboard over a remote sheet.",
    version="0.1.0",
    lifespan=lifespan,
)

# API routes
app.include_router(api_router)


@app.get("/health")
async def health():
    return {"ok": True, "sheet_configured": bool(_settings.sheet_api.url)}
