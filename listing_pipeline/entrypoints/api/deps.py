# listing_pipeline/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Header, HTTPException

from ...adapters.store.base import Store
from ...adapters.store.sqlalchemy_store import SqlAlchemyStore
from ...config import settings
from ...db import AsyncSessionLocal


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


def get_store() -> Store:
    return SqlAlchemyStore(AsyncSessionLocal)
