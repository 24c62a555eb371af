# listing_pipeline/service_layer/reconcile.py
from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..adapters.store.base import Store
from ..domain.types import MatchedImageSet, SourceRow, UpdateOutcome
from .record_builder import build_landmarks

log = logging.getLogger(__name__)


class Reconciler:
    """
    Media-only patch for rows that were ingested before their images existed.

    Only records whose main image is still the placeholder are eligible, so a
    second run over the same sheet finds nothing to patch (NotFound) instead of
    writing twice.
    """

    def __init__(
        self,
        store: Store,
        *,
        placeholder_url: str,
        table: str = "properties",
        call_timeout_s: float | None = None,
    ) -> None:
        self.store = store
        self.placeholder_url = placeholder_url
        self.table = table
        self.call_timeout_s = call_timeout_s

    def lookup_filter(self, row: SourceRow) -> dict[str, Any]:
        return {
            "project_name": row.project_name,
            "location": row.location,
            "bhk_config": row.configuration,
            "main_image_url": self.placeholder_url,
        }

    @staticmethod
    def media_patch(row: SourceRow, images: MatchedImageSet) -> dict[str, Any]:
        patch: dict[str, Any] = {
            "main_image_url": images.main_image,
            "image_gallery": images.gallery,
        }
        landmarks = build_landmarks(row)
        if landmarks:
            patch["nearby_landmarks"] = landmarks
        return patch

    async def reconcile(self, row: SourceRow, images: MatchedImageSet) -> UpdateOutcome:
        seq = row.sequence_number
        try:
            # limit=2 is enough to tell "unique" from "ambiguous"
            candidates = await asyncio.wait_for(
                self.store.find_many(self.table, self.lookup_filter(row), ["id"], limit=2, order_by="id"),
                timeout=self.call_timeout_s,
            )
        except asyncio.TimeoutError:
            return UpdateOutcome.failed(seq, f"lookup timeout after {self.call_timeout_s}s")
        except Exception as e:
            log.error("Row #%s: lookup failed: %s", seq, e)
            return UpdateOutcome.failed(seq, str(e) or type(e).__name__)

        if len(candidates) != 1:
            if candidates:
                log.warning(
                    "Row #%s: ambiguous match for (%s, %s, %s), reporting not found",
                    seq,
                    row.project_name,
                    row.location,
                    row.configuration,
                )
            else:
                log.warning(
                    "Row #%s: no placeholder-image record for (%s, %s, %s)",
                    seq,
                    row.project_name,
                    row.location,
                    row.configuration,
                )
            return UpdateOutcome.not_found(seq)

        property_id = candidates[0]["id"]
        try:
            res = await asyncio.wait_for(
                self.store.update(self.table, property_id, self.media_patch(row, images)),
                timeout=self.call_timeout_s,
            )
        except asyncio.TimeoutError:
            return UpdateOutcome.failed(seq, f"update timeout after {self.call_timeout_s}s")
        except Exception as e:
            log.error("Row #%s: update failed: %s", seq, e)
            return UpdateOutcome.failed(seq, str(e) or type(e).__name__)

        if res.error is not None:
            log.error("Row #%s: update of property %s failed: %s", seq, property_id, res.error)
            return UpdateOutcome.failed(seq, str(res.error) or type(res.error).__name__)

        log.info("Row #%s: updated property %s with %s gallery images", seq, property_id, len(images.gallery))
        return UpdateOutcome.updated(seq, property_id)
