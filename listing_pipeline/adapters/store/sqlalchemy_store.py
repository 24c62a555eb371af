# listing_pipeline/adapters/store/sqlalchemy_store.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ...models import TABLES, Base
from .base import InsertResult, Record, UpdateResult

log = logging.getLogger(__name__)


def _model(table: str) -> type[Base]:
    try:
        return TABLES[table]
    except KeyError:
        raise ValueError(f"Unknown table {table!r}. Known: {', '.join(sorted(TABLES))}") from None


def _columns(model: type[Base], names: list[str] | None):
    table = model.__table__
    if not names:
        return list(table.columns)
    missing = [n for n in names if n not in table.columns]
    if missing:
        raise ValueError(f"Unknown columns for {table.name}: {missing}")
    return [table.columns[n] for n in names]


def _where(model: type[Base], filter: Record):
    table = model.__table__
    clauses = []
    for k, v in (filter or {}).items():
        if k not in table.columns:
            raise ValueError(f"Unknown filter column for {table.name}: {k!r}")
        col = table.columns[k]
        clauses.append(col.is_(None) if v is None else col == v)
    return clauses


def _as_record(obj: Base) -> Record:
    return {c.name: getattr(obj, c.key) for c in obj.__table__.columns}


class SqlAlchemyStore:
    """
    Store over an async session factory. Each call is its own transaction, so a
    failed insert_many rolls back only that call's rows.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        self.session_maker = session_maker

    async def insert_many(self, table: str, records: list[Record]) -> InsertResult:
        model = _model(table)
        if not records:
            return InsertResult(inserted=[])

        async with self.session_maker() as session:
            try:
                objs = [model(**r) for r in records]
                session.add_all(objs)
                await session.flush()
                inserted = [_as_record(o) for o in objs]
                await session.commit()
                return InsertResult(inserted=inserted)
            except (SQLAlchemyError, TypeError) as e:
                # TypeError: a record carried a key the model doesn't have
                await session.rollback()
                log.warning("insert_many into %s failed (%s rows): %s", table, len(records), e)
                return InsertResult(error=e)

    async def update(self, table: str, id: Any, patch: Record) -> UpdateResult:
        model = _model(table)
        async with self.session_maker() as session:
            try:
                stmt = update(model).where(model.__table__.c.id == id).values(**patch)
                res = await session.execute(stmt)
                await session.commit()
                return UpdateResult(updated=int(res.rowcount or 0))
            except SQLAlchemyError as e:
                await session.rollback()
                log.warning("update %s id=%s failed: %s", table, id, e)
                return UpdateResult(error=e)

    async def find_one(self, table: str, filter: Record) -> Record | None:
        rows = await self.find_many(table, filter, limit=1, order_by="id")
        return rows[0] if rows else None

    async def find_many(
        self,
        table: str,
        filter: Record,
        projection: list[str] | None = None,
        *,
        limit: int | None = None,
        order_by: str | None = None,
    ) -> list[Record]:
        model = _model(table)
        cols = _columns(model, projection)
        q = select(*cols).where(*_where(model, filter))
        if order_by:
            q = q.order_by(_columns(model, [order_by])[0])
        if limit is not None:
            q = q.limit(limit)

        async with self.session_maker() as session:
            rows = (await session.execute(q)).mappings().all()
        return [dict(r) for r in rows]
