"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from api.v1 import api_router
from core import settings
from core.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    application = FastAPI(title=settings.app_name)
    application.include_router(api_router)

    @application.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return application
