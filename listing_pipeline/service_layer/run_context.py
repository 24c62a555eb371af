# listing_pipeline/service_layer/run_context.py
from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ..adapters.listing.base import FileLister, extract_folder_id
from ..adapters.listing.factory import build_file_lister
from ..adapters.store.base import Store
from ..config import settings
from ..domain.normalize import normalize_city
from ..domain.slugs import SlugRegistry
from ..domain.types import DriveFile, SourceRow

log = logging.getLogger(__name__)


async def load_candidate_files(
    drive_folder_url: str | None,
    lister: FileLister | None = None,
    *,
    timeout_s: float | None = None,
) -> list[DriveFile]:
    """
    One listing call per run. No URL means no images for this run (every row gets
    the placeholder); a bad URL or a failed listing raises and aborts the run.
    """
    if not drive_folder_url:
        log.info("No drive folder URL given, all rows will use the placeholder image")
        return []

    folder_id = extract_folder_id(drive_folder_url)
    lister = lister or build_file_lister()
    files = await asyncio.wait_for(lister.list_files(folder_id), timeout=timeout_s)
    log.info("Found %s image files in folder %s", len(files), folder_id)
    return files


async def resolve_agent_id(store: Store, *, timeout_s: float | None = None) -> str:
    try:
        rows = await asyncio.wait_for(
            store.find_many("agents", {"is_active": True}, ["id"], limit=1, order_by="id"),
            timeout=timeout_s,
        )
    except Exception as e:
        log.warning("Agent lookup failed (%s), using fallback agent id", e)
        return settings.FALLBACK_AGENT_ID

    if rows:
        return str(rows[0]["id"])
    log.warning("No active agent found, using fallback agent id %s", settings.FALLBACK_AGENT_ID)
    return settings.FALLBACK_AGENT_ID


async def load_slug_registry(store: Store, table: str, *, timeout_s: float | None = None) -> SlugRegistry:
    rows = await asyncio.wait_for(store.find_many(table, {}, ["slug", "seo_slug"]), timeout=timeout_s)
    registry = SlugRegistry(s for r in rows for s in (r.get("slug"), r.get("seo_slug")))
    log.info("Loaded %s existing slugs", len(registry))
    return registry


def split_by_city(rows: Sequence[SourceRow], target_city: str) -> tuple[list[SourceRow], list[int]]:
    target = normalize_city(target_city)
    kept: list[SourceRow] = []
    skipped: list[int] = []
    for row in rows:
        if normalize_city(row.city) == target:
            kept.append(row)
        else:
            log.info("Row #%s: skipping city %r", row.sequence_number, row.city)
            skipped.append(row.sequence_number)
    return kept, skipped


def describe_error(e: BaseException) -> str:
    if isinstance(e, asyncio.TimeoutError):
        return "timed out"
    return str(e) or type(e).__name__
