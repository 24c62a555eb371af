# listing_pipeline/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from ..db import create_all
from .api.routers import health, jobs


def create_app() -> FastAPI:
    app = FastAPI(title="Listing Pipeline - Bulk Property Ingestion")

    @app.on_event("startup")
    async def _startup() -> None:
        # Single place where DB tables are created in dev.
        await create_all()

    app.include_router(health.router)
    app.include_router(jobs.router)

    return app
