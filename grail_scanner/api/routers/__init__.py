"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from grail_scanner.api.routers.authenticate import router as authenticate_router
from grail_scanner.api.routers.system import router as system_router
from grail_scanner.api.routers.tools import router as tools_router

api_router = APIRouter()

api_router.include_router(system_router, tags=["system"])
api_router.include_router(tools_router, prefix="/tools", tags=["tools"])
api_router.include_router(authenticate_router, prefix="/authenticate", tags=["authenticate"])
