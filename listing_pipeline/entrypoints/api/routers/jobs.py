# listing_pipeline/entrypoints/api/routers/jobs.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_store, require_api_key
from ....adapters.sheets import rows_from_records
from ....adapters.store.base import Store
from ....db import get_session
from ....domain.types import SourceRow
from ....schemas import (
    BatchResultOut,
    BulkJobRequest,
    ReconciliationSummaryOut,
    SeedNeededOut,
    SeedResultOut,
)
from ....service_layer.jobruns import finish_job_fail, finish_job_success, start_job
from ....service_layer.use_cases.bulk_insert import bulk_insert
from ....service_layer.use_cases.bulk_update_media import bulk_update_media
from ....service_layer.use_cases.seed import seed_reference_data, seeding_needed

router = APIRouter(tags=["jobs"])


def _parse_rows(body: BulkJobRequest) -> list[SourceRow]:
    try:
        return rows_from_records(body.rows)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


async def _finish(session: AsyncSession, jr: Any, summary: dict[str, Any], fatal_error: str | None) -> None:
    if fatal_error:
        await finish_job_fail(session, jr, fatal_error, summary)
    else:
        await finish_job_success(session, jr, summary)
    await session.commit()


@router.post("/jobs/bulk-insert", response_model=BatchResultOut, dependencies=[Depends(require_api_key)])
async def jobs_bulk_insert(
    body: BulkJobRequest,
    session: AsyncSession = Depends(get_session),
    store: Store = Depends(get_store),
) -> BatchResultOut:
    rows = _parse_rows(body)

    # commit now: the run itself writes through separate sessions
    jr = await start_job(session, "bulk_insert_api", {"rows": len(rows), "drive_folder_url": body.drive_folder_url})
    await session.commit()
    try:
        res = await bulk_insert(rows, body.drive_folder_url, store=store)
        snap = res.snapshot()
        await _finish(session, jr, snap, res.fatal_error)
        return BatchResultOut(**snap)
    except Exception as e:
        await finish_job_fail(session, jr, e)
        await session.commit()
        raise


@router.post(
    "/jobs/bulk-update-media",
    response_model=ReconciliationSummaryOut,
    dependencies=[Depends(require_api_key)],
)
async def jobs_bulk_update_media(
    body: BulkJobRequest,
    session: AsyncSession = Depends(get_session),
    store: Store = Depends(get_store),
) -> ReconciliationSummaryOut:
    rows = _parse_rows(body)

    jr = await start_job(
        session, "bulk_update_media_api", {"rows": len(rows), "drive_folder_url": body.drive_folder_url}
    )
    await session.commit()
    try:
        res = await bulk_update_media(rows, body.drive_folder_url, store=store)
        snap = res.snapshot()
        await _finish(session, jr, snap, res.fatal_error)
        return ReconciliationSummaryOut(**snap)
    except Exception as e:
        await finish_job_fail(session, jr, e)
        await session.commit()
        raise


@router.post("/jobs/seed", response_model=SeedResultOut, dependencies=[Depends(require_api_key)])
async def jobs_seed(
    session: AsyncSession = Depends(get_session),
    store: Store = Depends(get_store),
) -> SeedResultOut:
    jr = await start_job(session, "seed_api")
    await session.commit()
    try:
        res = await seed_reference_data(store)
        snap = res.snapshot()
        # phase errors are partial failures; the run itself still completed
        await finish_job_success(session, jr, snap)
        await session.commit()
        return SeedResultOut(**snap)
    except Exception as e:
        await finish_job_fail(session, jr, e)
        await session.commit()
        raise


@router.get("/jobs/seed/needed", response_model=SeedNeededOut, dependencies=[Depends(require_api_key)])
async def jobs_seed_needed(store: Store = Depends(get_store)) -> SeedNeededOut:
    return SeedNeededOut(needed=await seeding_needed(store))
