"""Version 1 API routers."""

from fastapi import APIRouter

from .follows import router as follows_router
from .notifications import router as notifications_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(follows_router)
api_router.include_router(notifications_router)

__all__ = ["api_router"]
