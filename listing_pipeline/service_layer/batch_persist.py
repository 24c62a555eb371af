# listing_pipeline/service_layer/batch_persist.py
from __future__ import annotations

import asyncio
import logging
from typing import Iterator, Sequence

from ..adapters.store.base import Store
from ..domain.types import BatchResult, ChunkOutcome, IngestEntity

log = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 20


def chunked(items: Sequence[IngestEntity], size: int) -> Iterator[Sequence[IngestEntity]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


class BatchPersistenceEngine:
    """
    Inserts entities in fixed-size chunks, one insert_many call per chunk.

    A chunk succeeds or fails as a unit: a failed chunk is recorded with its error
    and the run moves on to the next chunk. Nothing is retried. Use batch_size=1
    when per-row failure isolation matters more than call volume.
    """

    def __init__(
        self,
        store: Store,
        *,
        table: str = "properties",
        batch_size: int = DEFAULT_BATCH_SIZE,
        call_timeout_s: float | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1 (got {batch_size})")
        self.store = store
        self.table = table
        self.batch_size = batch_size
        self.call_timeout_s = call_timeout_s

    async def _insert(self, records: list[dict]) -> tuple[int, str | None]:
        try:
            res = await asyncio.wait_for(self.store.insert_many(self.table, records), timeout=self.call_timeout_s)
        except asyncio.TimeoutError:
            return 0, f"timeout after {self.call_timeout_s}s"
        except Exception as e:
            # a store that raises instead of returning an error still fails only this chunk
            log.exception("insert_many raised")
            return 0, str(e) or type(e).__name__
        if res.error is not None:
            return 0, str(res.error) or type(res.error).__name__
        return len(res.inserted), None

    async def persist(self, entities: Sequence[IngestEntity]) -> BatchResult:
        result = BatchResult(total=len(entities), prepared=len(entities))

        for index, chunk in enumerate(chunked(entities, self.batch_size), start=1):
            seqs = tuple(e.sequence_number for e in chunk)
            inserted, error = await self._insert([e.to_record() for e in chunk])

            if error is not None:
                log.error("Batch %s (%s rows) failed: %s", index, len(chunk), error)
            else:
                log.info("Batch %s inserted %s rows", index, inserted)

            result.record_chunk(ChunkOutcome(index=index, sequence_numbers=seqs, inserted=inserted, error=error))

        log.info(
            "Persist complete: %s inserted, %s errored across %s batches",
            result.inserted_count,
            result.errored_count,
            len(result.chunks),
        )
        return result
