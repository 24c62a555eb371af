# listing_pipeline/service_layer/use_cases/bulk_insert.py
from __future__ import annotations

import logging
from typing import Sequence

from ...adapters.listing.base import FileLister
from ...adapters.store.base import Store
from ...config import settings
from ...domain.filename_matcher import match_images
from ...domain.types import BatchResult, IngestEntity, SourceRow
from ..batch_persist import BatchPersistenceEngine
from ..record_builder import BuilderDefaults, RecordBuilder
from ..run_context import (
    describe_error,
    load_candidate_files,
    load_slug_registry,
    resolve_agent_id,
    split_by_city,
)

log = logging.getLogger(__name__)


async def bulk_insert(
    rows: Sequence[SourceRow],
    drive_folder_url: str | None,
    *,
    store: Store,
    lister: FileLister | None = None,
    defaults: BuilderDefaults | None = None,
    batch_size: int | None = None,
    target_city: str | None = None,
) -> BatchResult:
    """
    Spreadsheet rows + image folder -> new property records.

      1) list the folder once; a bad URL or listing failure aborts the run
      2) resolve the run's agent and seed the slug registry from stored listings
      3) match images and build one entity per target-city row; a row that
         fails to build is counted as errored and left out
      4) persist in chunks; a failing chunk does not stop the rest

    Never raises for operational failures. Run-start problems land in
    `fatal_error`; per-row and per-chunk failures are counted in `errored_count`.
    """
    result = BatchResult(total=len(rows))
    table = settings.INGEST_TABLE

    try:
        files = await load_candidate_files(drive_folder_url, lister, timeout_s=settings.FILE_LISTING_TIMEOUT_S)
        registry = await load_slug_registry(store, table, timeout_s=settings.STORE_CALL_TIMEOUT_S)
    except Exception as e:
        result.fatal_error = describe_error(e)
        log.error("Bulk insert aborted before persistence: %s", result.fatal_error)
        return result

    if defaults is None:
        agent_id = await resolve_agent_id(store, timeout_s=settings.STORE_CALL_TIMEOUT_S)
        defaults = BuilderDefaults.from_settings(agent_id=agent_id)
    builder = RecordBuilder(defaults)

    kept, result.skipped = split_by_city(rows, target_city or settings.INGEST_TARGET_CITY)

    entities: list[IngestEntity] = []
    for row in kept:
        images = match_images(row.sequence_number, files, placeholder_url=defaults.placeholder_url)
        if images.matched:
            result.image_match_count += 1
        else:
            result.no_image_count += 1
        try:
            entities.append(builder.build(row, images, registry))
        except Exception as e:
            log.error("Row #%s: could not build record: %s", row.sequence_number, e)
            result.record_build_failure(row.sequence_number, str(e) or type(e).__name__)
    result.prepared = len(entities)

    engine = BatchPersistenceEngine(
        store,
        table=table,
        batch_size=batch_size or settings.INGEST_BATCH_SIZE,
        call_timeout_s=settings.STORE_CALL_TIMEOUT_S,
    )
    result.merge_persisted(await engine.persist(entities))

    log.info(
        "Bulk insert done: %s rows, %s inserted, %s errored, %s skipped, %s without images",
        result.total,
        result.inserted_count,
        result.errored_count,
        len(result.skipped),
        result.no_image_count,
    )
    return result
