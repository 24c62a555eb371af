# listing_pipeline/service_layer/use_cases/bulk_update_media.py
from __future__ import annotations

import logging
from typing import Sequence

from ...adapters.listing.base import FileLister
from ...adapters.store.base import Store
from ...config import settings
from ...domain.filename_matcher import match_images
from ...domain.types import ReconciliationSummary, SourceRow
from ..reconcile import Reconciler
from ..run_context import describe_error, load_candidate_files, split_by_city

log = logging.getLogger(__name__)


async def bulk_update_media(
    rows: Sequence[SourceRow],
    drive_folder_url: str | None,
    *,
    store: Store,
    lister: FileLister | None = None,
    placeholder_url: str | None = None,
    target_city: str | None = None,
) -> ReconciliationSummary:
    """
    Patch images (and landmarks) onto listings that still show the placeholder.
    Rows are handled one at a time; each gets exactly one outcome.
    """
    summary = ReconciliationSummary(total=len(rows))
    placeholder = placeholder_url or settings.PLACEHOLDER_IMAGE_URL

    try:
        files = await load_candidate_files(drive_folder_url, lister, timeout_s=settings.FILE_LISTING_TIMEOUT_S)
    except Exception as e:
        summary.fatal_error = describe_error(e)
        log.error("Media update aborted before any writes: %s", summary.fatal_error)
        return summary

    reconciler = Reconciler(
        store,
        placeholder_url=placeholder,
        table=settings.INGEST_TABLE,
        call_timeout_s=settings.STORE_CALL_TIMEOUT_S,
    )

    kept, summary.skipped = split_by_city(rows, target_city or settings.INGEST_TARGET_CITY)
    for row in kept:
        images = match_images(row.sequence_number, files, placeholder_url=placeholder)
        if not images.matched:
            summary.no_image_count += 1
        summary.add(await reconciler.reconcile(row, images))

    log.info(
        "Media update done: %s rows, %s updated, %s not found, %s errored, %s skipped",
        summary.total,
        summary.updated_count,
        summary.not_found_count,
        summary.errored_count,
        len(summary.skipped),
    )
    return summary
