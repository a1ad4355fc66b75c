"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.views import router as views_router
from app.api.requests import router as requests_router
from app.api.admin import router as admin_router

api_router = APIRouter()
api_router.include_router(views_router)
api_router.include_router(requests_router)
api_router.include_router(admin_router)
