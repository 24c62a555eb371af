import random

import pytest

from listing_pipeline.domain.catalog import CITY_CATALOG, COMPLETION_STATUSES
from listing_pipeline.service_layer.seeding import (
    CityPhase,
    DeveloperPhase,
    MicromarketPhase,
    ProjectPhase,
    SeedingCascade,
)
from listing_pipeline.service_layer.use_cases.seed import seed_reference_data, seeding_needed

N_MICROMARKETS = sum(len(c.micromarkets) for c in CITY_CATALOG)
N_DEVELOPERS = sum(len(c.developers) for c in CITY_CATALOG)


async def _counts(store) -> dict[str, int]:
    return {t: len(await store.find_many(t, {}, ["id"])) for t in ("cities", "micro_markets", "developers", "projects")}


@pytest.mark.asyncio
async def test_seed_idempotent_runs_twice(store):
    assert await seeding_needed(store) is True

    first = await seed_reference_data(store, rng=random.Random(7))

    assert first.errors == []
    assert first.counts == {
        "cities": len(CITY_CATALOG),
        "micromarkets": N_MICROMARKETS,
        "developers": N_DEVELOPERS,
        # first 10 markets (7 Bangalore, 3 Delhi) x 2 same-city developers
        "projects": 20,
    }
    after_first = await _counts(store)

    second = await seed_reference_data(store, rng=random.Random(99))

    assert second.counts == {"cities": 0, "micromarkets": 0, "developers": 0, "projects": 0}
    assert second.seeded is False
    assert await _counts(store) == after_first
    assert await seeding_needed(store) is False


@pytest.mark.asyncio
async def test_projects_pair_market_and_developer_from_same_city(store):
    await seed_reference_data(store, rng=random.Random(1))

    markets = {m["id"]: m for m in await store.find_many("micro_markets", {}, ["id", "city_id"])}
    devs = {d["id"]: d for d in await store.find_many("developers", {}, ["id", "primary_market_id"])}
    projects = await store.find_many(
        "projects",
        {},
        ["micro_market_id", "developer_id", "city_id", "url_slug", "price_range_text", "completion_status"],
    )

    assert projects
    for p in projects:
        assert markets[p["micro_market_id"]]["city_id"] == p["city_id"]
        assert devs[p["developer_id"]]["primary_market_id"] == p["city_id"]
        assert p["completion_status"] in COMPLETION_STATUSES
        assert p["price_range_text"].startswith("₹")
    assert len({p["url_slug"] for p in projects}) == len(projects)


@pytest.mark.asyncio
async def test_partial_seed_fills_only_the_gaps(store):
    await store.insert_many(
        "cities", [{"city_name": "Bangalore", "country": "India", "url_slug": "bangalore"}]
    )

    res = await seed_reference_data(store, rng=random.Random(3))

    assert res.counts["cities"] == len(CITY_CATALOG) - 1
    bangalore = await store.find_many("cities", {"city_name": "Bangalore"}, ["id"])
    assert len(bangalore) == 1


@pytest.mark.asyncio
async def test_failed_phase_does_not_block_later_phases(store, flaky_store):
    res = await seed_reference_data(flaky_store(fail_tables=("developers",)), rng=random.Random(5))

    assert res.counts["cities"] == len(CITY_CATALOG)
    assert res.counts["micromarkets"] == N_MICROMARKETS
    assert res.counts["developers"] == 0
    assert res.counts["projects"] == 0
    assert {phase for phase, _ in res.errors} == {"developers"}
    assert res.snapshot()["errors"][0] == {"phase": "developers", "error": "boom"}


def test_phases_must_follow_their_dependencies(store):
    rng = random.Random(0)

    with pytest.raises(ValueError, match="projects"):
        SeedingCascade(store, [CityPhase(), ProjectPhase(rng=rng), MicromarketPhase(rng=rng), DeveloperPhase(rng=rng)])

    with pytest.raises(ValueError, match="Duplicate"):
        SeedingCascade(store, [CityPhase(), CityPhase()])

    SeedingCascade(store, [CityPhase(), DeveloperPhase(rng=rng), MicromarketPhase(rng=rng), ProjectPhase(rng=rng)])


class RaisingStore:
    """insert_many raises for the given tables instead of returning an error result."""

    def __init__(self, inner, tables: tuple[str, ...]):
        self.inner = inner
        self.tables = tables

    async def insert_many(self, table, records):
        if table in self.tables:
            raise ConnectionError("connection reset")
        return await self.inner.insert_many(table, records)

    async def find_many(self, table, filter, projection=None, *, limit=None, order_by=None):
        return await self.inner.find_many(table, filter, projection, limit=limit, order_by=order_by)


class UnreachableStore:
    async def find_many(self, table, filter, projection=None, *, limit=None, order_by=None):
        raise ConnectionError("database unreachable")


@pytest.mark.asyncio
async def test_raising_insert_is_recorded_and_later_phases_run(store):
    res = await seed_reference_data(RaisingStore(store, ("developers",)), rng=random.Random(1))

    assert res.counts["cities"] == len(CITY_CATALOG)
    assert res.counts["micromarkets"] == N_MICROMARKETS
    assert res.counts["developers"] == 0
    assert "projects" in res.counts
    assert ("developers", "connection reset") in res.errors
    assert {phase for phase, _ in res.errors} == {"developers"}


@pytest.mark.asyncio
async def test_seeding_needed_survives_unreachable_store():
    assert await seeding_needed(UnreachableStore()) is True
