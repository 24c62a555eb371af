# tests/conftest.py
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from listing_pipeline.adapters.clients.http_resilience import reset_circuit
from listing_pipeline.adapters.listing.base import FileListingError
from listing_pipeline.adapters.store.base import InsertResult
from listing_pipeline.adapters.store.sqlalchemy_store import SqlAlchemyStore
from listing_pipeline.domain.types import DriveFile, SourceRow
from listing_pipeline.models import Base

FOLDER_URL = "https://drive.google.com/drive/folders/1AbC-folder_9?usp=sharing"


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
def store(async_session_maker):
    return SqlAlchemyStore(async_session_maker)


@pytest.fixture(autouse=True)
def _closed_circuit():
    reset_circuit()
    yield
    reset_circuit()


class StaticLister:
    """FileLister returning a fixed listing; records which folder ids were asked for."""

    def __init__(self, files: list[DriveFile]) -> None:
        self.files = files
        self.calls: list[str] = []

    async def list_files(self, folder_id: str) -> list[DriveFile]:
        self.calls.append(folder_id)
        return list(self.files)


class BrokenLister:
    async def list_files(self, folder_id: str) -> list[DriveFile]:
        raise FileListingError(f"Drive listing failed for folder {folder_id}: 403 Forbidden")


class FlakyStore:
    """
    Wraps a real store; selected insert_many calls (1-based call number, or
    every call for a table) report an error instead of writing.
    """

    def __init__(self, inner: Any, *, fail_calls: tuple[int, ...] = (), fail_tables: tuple[str, ...] = ()):
        self.inner = inner
        self.fail_calls = set(fail_calls)
        self.fail_tables = set(fail_tables)
        self.insert_calls = 0

    async def insert_many(self, table, records):
        self.insert_calls += 1
        if self.insert_calls in self.fail_calls or table in self.fail_tables:
            return InsertResult(error=RuntimeError("boom"))
        return await self.inner.insert_many(table, records)

    async def update(self, table, id, patch):
        return await self.inner.update(table, id, patch)

    async def find_one(self, table, filter):
        return await self.inner.find_one(table, filter)

    async def find_many(self, table, filter, projection=None, *, limit=None, order_by=None):
        return await self.inner.find_many(table, filter, projection, limit=limit, order_by=order_by)


@pytest.fixture
def static_lister():
    return StaticLister


@pytest.fixture
def broken_lister():
    return BrokenLister()


@pytest.fixture
def flaky_store(store):
    def _make(**kw) -> FlakyStore:
        return FlakyStore(store, **kw)

    return _make


@pytest.fixture
def make_row():
    def _make(seq: int, **kw) -> SourceRow:
        base: dict[str, Any] = {
            "sequence_number": seq,
            "city": "Hyderabad",
            "location": "Narsingi",
            "project_name": "My Home Avatar",
            "property_type": "Apartment",
            "configuration": "3 BHK",
            "sqft": 1850.0,
            "floor": "9",
            "facing": "East",
            "parkings": 2,
            "price": 15_000_000.0,
            "price_display": "1.5 Cr",
            "bedrooms": 3,
            "bathrooms": 3,
            "total_floors": "32",
        }
        base.update(kw)
        return SourceRow(**base)

    return _make


@pytest.fixture
def drive_file():
    def _make(name: str) -> DriveFile:
        fid = "id-" + name.replace(" ", "_")
        return DriveFile(id=fid, name=name, url=f"https://drive.google.com/uc?export=view&id={fid}")

    return _make


@pytest.fixture
def folder_url() -> str:
    return FOLDER_URL
