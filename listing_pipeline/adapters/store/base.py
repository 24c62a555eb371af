# listing_pipeline/adapters/store/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

Record = dict[str, Any]


@dataclass(frozen=True)
class InsertResult:
    inserted: list[Record] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class UpdateResult:
    updated: int = 0
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Store(Protocol):
    """
    Table-oriented persistence seam. Filters are column == value conjunctions.

    Writes report failures through the result object instead of raising, so a
    caller can keep going after a bad batch.
    """

    async def insert_many(self, table: str, records: list[Record]) -> InsertResult:
        raise NotImplementedError

    async def update(self, table: str, id: Any, patch: Record) -> UpdateResult:
        raise NotImplementedError

    async def find_one(self, table: str, filter: Record) -> Record | None:
        raise NotImplementedError

    async def find_many(
        self,
        table: str,
        filter: Record,
        projection: list[str] | None = None,
        *,
        limit: int | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        raise NotImplementedError
