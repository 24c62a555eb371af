# listing_pipeline/service_layer/seeding.py
from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from ..adapters.store.base import Record, Store
from ..config import settings
from ..domain.catalog import CITY_BY_NAME, CITY_CATALOG, COMPLETION_STATUSES, CitySeed, seo_metadata
from ..domain.slugs import SlugRegistry, ensure_unique
from ..domain.types import SeedResult

log = logging.getLogger(__name__)


class SeedPhase(Protocol):
    """
    One table's worth of seeding. `plan` reads current store contents and returns
    the rows still missing, grouped into insert calls; it never writes.
    """

    name: str
    table: str
    depends_on: tuple[str, ...]

    async def plan(self, store: Store) -> list[list[Record]]: ...


async def _catalog_cities(store: Store, catalog: dict[str, CitySeed]) -> list[tuple[Record, CitySeed]]:
    cities = await store.find_many("cities", {}, ["id", "city_name"], order_by="id")
    return [(c, catalog[c["city_name"]]) for c in cities if c["city_name"] in catalog]


@dataclass
class CityPhase:
    catalog: Sequence[CitySeed] = CITY_CATALOG
    name: str = "cities"
    table: str = "cities"
    depends_on: tuple[str, ...] = ()

    async def plan(self, store: Store) -> list[list[Record]]:
        existing = {c["city_name"] for c in await store.find_many("cities", {}, ["city_name"])}
        missing = [c for c in self.catalog if c.name not in existing]
        if not missing:
            return []

        rows: list[Record] = []
        for city in missing:
            seo = seo_metadata(city.name)
            rows.append(
                {
                    "city_name": city.name,
                    "country": city.country,
                    "url_slug": seo.slug,
                    "seo_title": seo.seo_title,
                    "meta_description": seo.meta_description,
                    "h1_title": seo.h1_title,
                    "hero_hook": seo.hero_hook,
                    "city_overview_seo": (
                        f"{city.name} is a dynamic real estate market offering diverse investment opportunities."
                    ),
                    "page_status": "draft",
                    "average_price_sqft": 5000,
                    "annual_appreciation_pct": 8,
                    "rental_yield_pct": 3,
                }
            )
        return [rows]


@dataclass
class MicromarketPhase:
    rng: random.Random
    catalog: dict[str, CitySeed] = field(default_factory=lambda: dict(CITY_BY_NAME))
    name: str = "micromarkets"
    table: str = "micro_markets"
    depends_on: tuple[str, ...] = ("cities",)

    async def plan(self, store: Store) -> list[list[Record]]:
        groups: list[list[Record]] = []
        for city, seed in await _catalog_cities(store, self.catalog):
            existing = {
                m["micro_market_name"]
                for m in await store.find_many("micro_markets", {"city_id": city["id"]}, ["micro_market_name"])
            }
            rows: list[Record] = []
            for mm_name in seed.micromarkets:
                if mm_name in existing:
                    continue
                seo = seo_metadata(mm_name, city["city_name"])
                rows.append(
                    {
                        "micro_market_name": mm_name,
                        "city_id": city["id"],
                        "url_slug": seo.slug,
                        "seo_title": seo.seo_title,
                        "meta_description": seo.meta_description,
                        "h1_title": seo.h1_title,
                        "hero_hook": seo.hero_hook,
                        "status": "draft",
                        "price_per_sqft_min": 5000 + self.rng.randrange(3000),
                    }
                )
            if rows:
                groups.append(rows)
        return groups


@dataclass
class DeveloperPhase:
    rng: random.Random
    catalog: dict[str, CitySeed] = field(default_factory=lambda: dict(CITY_BY_NAME))
    name: str = "developers"
    table: str = "developers"
    depends_on: tuple[str, ...] = ("cities",)

    async def plan(self, store: Store) -> list[list[Record]]:
        groups: list[list[Record]] = []
        for city, seed in await _catalog_cities(store, self.catalog):
            existing = {
                d["developer_name"]
                for d in await store.find_many(
                    "developers", {"primary_market_id": city["id"]}, ["developer_name"]
                )
            }
            rows: list[Record] = []
            for dev in seed.developers:
                if dev.name in existing:
                    continue
                seo = seo_metadata(dev.name, city["city_name"])
                rows.append(
                    {
                        "developer_name": dev.name,
                        "primary_market_id": city["id"],
                        "url_slug": seo.slug,
                        "seo_title": seo.seo_title,
                        "meta_description": seo.meta_description,
                        "hero_description": f"Leading real estate developer specializing in {dev.specialization}",
                        "long_description_seo": (
                            f"{dev.name} has been transforming {city['city_name']}'s skyline for "
                            f"{dev.years} years with exceptional {dev.specialization}."
                        ),
                        "specialization": dev.specialization,
                        "years_in_business": dev.years,
                        "total_projects": self.rng.randint(5, 24),
                        "total_sft_delivered": f"{self.rng.randint(10, 59)} Million SFT",
                    }
                )
            if rows:
                groups.append(rows)
        return groups


@dataclass
class ProjectPhase:
    rng: random.Random
    micromarket_sample: int = 10
    developers_per_market: int = 2
    name: str = "projects"
    table: str = "projects"
    depends_on: tuple[str, ...] = ("micromarkets", "developers")

    def _price_range(self) -> str:
        low = 5 + self.rng.random() * 10
        high = 15 + self.rng.random() * 20
        return f"₹{low:.2f}Cr - ₹{high:.2f}Cr"

    async def plan(self, store: Store) -> list[list[Record]]:
        markets = await store.find_many(
            "micro_markets", {}, ["id", "micro_market_name", "city_id"], limit=self.micromarket_sample, order_by="id"
        )
        developers = await store.find_many(
            "developers", {}, ["id", "developer_name", "primary_market_id"], order_by="id"
        )
        slugs = SlugRegistry(p["url_slug"] for p in await store.find_many("projects", {}, ["url_slug"]))

        groups: list[list[Record]] = []
        for mm in markets:
            # same-city pairs only: a project's city is its market's and its developer's city
            local_devs = [d for d in developers if d["primary_market_id"] == mm["city_id"]]
            for dev in local_devs[: self.developers_per_market]:
                existing = await store.find_many(
                    "projects", {"micro_market_id": mm["id"], "developer_id": dev["id"]}, ["id"], limit=1
                )
                if existing:
                    continue

                project_name = f"{dev['developer_name'].split(' ')[0]} {mm['micro_market_name']}"
                seo = seo_metadata(project_name)
                groups.append(
                    [
                        {
                            "project_name": project_name,
                            "micro_market_id": mm["id"],
                            "developer_id": dev["id"],
                            "city_id": mm["city_id"],
                            "url_slug": ensure_unique(seo.slug, slugs),
                            "seo_title": seo.seo_title,
                            "meta_description": seo.meta_description,
                            "h1_title": seo.h1_title,
                            "hero_hook": seo.hero_hook,
                            "project_overview_seo": (
                                f"{project_name} is a premium real estate project offering modern living spaces."
                            ),
                            "price_range_text": self._price_range(),
                            "completion_status": self.rng.choice(COMPLETION_STATUSES),
                            "status": "draft",
                        }
                    ]
                )
        return groups


def default_phases(rng: random.Random | None = None) -> list[SeedPhase]:
    rng = rng or random.Random()
    return [
        CityPhase(),
        MicromarketPhase(rng=rng),
        DeveloperPhase(rng=rng),
        ProjectPhase(
            rng=rng,
            micromarket_sample=settings.SEED_PROJECT_MICROMARKET_SAMPLE,
            developers_per_market=settings.SEED_PROJECT_DEVELOPERS_PER_MARKET,
        ),
    ]


def validate_phase_order(phases: Sequence[SeedPhase]) -> None:
    seen: set[str] = set()
    for phase in phases:
        if phase.name in seen:
            raise ValueError(f"Duplicate seed phase {phase.name!r}")
        missing = [d for d in phase.depends_on if d not in seen]
        if missing:
            raise ValueError(f"Seed phase {phase.name!r} runs before its dependencies {missing}")
        seen.add(phase.name)


class SeedingCascade:
    """
    Runs seed phases strictly in list order. A phase's inserts all complete
    before the next phase plans, so later phases see earlier phases' rows.
    """

    def __init__(
        self,
        store: Store,
        phases: Sequence[SeedPhase] | None = None,
        *,
        rng: random.Random | None = None,
        call_timeout_s: float | None = None,
    ) -> None:
        self.store = store
        self.phases = list(phases) if phases is not None else default_phases(rng)
        validate_phase_order(self.phases)
        self.call_timeout_s = call_timeout_s

    async def seeding_needed(self) -> bool:
        """A phase that can't be planned counts as needing a run; seeding is idempotent."""
        for phase in self.phases:
            try:
                groups = await asyncio.wait_for(phase.plan(self.store), timeout=self.call_timeout_s)
            except Exception as e:
                log.warning("Seed phase %s: planning failed (%s), reporting seeding needed", phase.name, e)
                return True
            if groups:
                return True
        return False

    async def _run_phase(self, phase: SeedPhase, result: SeedResult) -> int:
        try:
            groups = await asyncio.wait_for(phase.plan(self.store), timeout=self.call_timeout_s)
        except Exception as e:
            log.error("Seed phase %s: planning failed: %s", phase.name, e)
            result.errors.append((phase.name, str(e) or type(e).__name__))
            return 0

        inserted = 0
        for rows in groups:
            try:
                res = await asyncio.wait_for(self.store.insert_many(phase.table, rows), timeout=self.call_timeout_s)
            except asyncio.TimeoutError:
                result.errors.append((phase.name, f"timeout after {self.call_timeout_s}s"))
                continue
            except Exception as e:
                log.error("Seed phase %s: insert of %s rows raised: %s", phase.name, len(rows), e)
                result.errors.append((phase.name, str(e) or type(e).__name__))
                continue
            if res.error is not None:
                log.error("Seed phase %s: insert of %s rows failed: %s", phase.name, len(rows), res.error)
                result.errors.append((phase.name, str(res.error) or type(res.error).__name__))
                continue
            inserted += len(res.inserted)
        return inserted

    async def run(self) -> SeedResult:
        result = SeedResult()
        for phase in self.phases:
            count = await self._run_phase(phase, result)
            result.counts[phase.name] = count
            log.info("Seeded %s %s", count, phase.name)
        return result
