# listing_pipeline/domain/catalog.py
"""
Reference catalog the seeding cascade diffs against. Names are natural keys:
renaming an entry here creates a new row on the next seed, it never renames one.
"""
from __future__ import annotations

from dataclasses import dataclass

from .slugs import slugify


@dataclass(frozen=True)
class DeveloperSeed:
    name: str
    specialization: str
    years: int


@dataclass(frozen=True)
class CitySeed:
    name: str
    country: str
    micromarkets: tuple[str, ...]
    developers: tuple[DeveloperSeed, ...]


CITY_CATALOG: tuple[CitySeed, ...] = (
    CitySeed(
        name="Bangalore",
        country="India",
        micromarkets=(
            "Koramangala",
            "Indiranagar",
            "Whitefield",
            "Bannerghatta Road",
            "Bellandur",
            "HSR Layout",
            "Electronic City",
        ),
        developers=(
            DeveloperSeed("Prestige Group", "Luxury Apartments", 35),
            DeveloperSeed("Sobha Limited", "Premium Villas", 25),
            DeveloperSeed("Brigade Group", "Mixed-use Projects", 30),
            DeveloperSeed("Puravankara", "Residential", 45),
        ),
    ),
    CitySeed(
        name="Delhi",
        country="India",
        micromarkets=("Safdarjung", "New Delhi", "Karol Bagh", "Dwarka", "Rohini", "Lajpat Nagar"),
        developers=(
            DeveloperSeed("DLF Limited", "Luxury Apartments", 75),
            DeveloperSeed("Unitech Group", "Residential", 50),
            DeveloperSeed("Ansal API", "Housing", 55),
        ),
    ),
    CitySeed(
        name="Noida",
        country="India",
        micromarkets=("Sector 120", "Sector 150", "Eldeco", "Express Zone", "Techzone", "Greater Noida West"),
        developers=(
            DeveloperSeed("Supertech Limited", "High-rise Apartments", 30),
            DeveloperSeed("Gaurs Group", "Residential Towers", 25),
            DeveloperSeed("ATS Group", "Premium Housing", 20),
        ),
    ),
    CitySeed(
        name="Gurugram",
        country="India",
        micromarkets=("DLF Phase 5", "Sohna Road", "Golf Course Road", "MG Road", "Cyber City", "New Gurugram"),
        developers=(
            DeveloperSeed("M3M Group", "Luxury Projects", 15),
            DeveloperSeed("Emaar India", "Premium Townships", 20),
            DeveloperSeed("Ireo", "Luxury Residences", 12),
        ),
    ),
    CitySeed(
        name="Alibaug",
        country="India",
        micromarkets=("Beach Area", "Fort Area", "Alibaug City", "Kihim", "Awas"),
        developers=(
            DeveloperSeed("Lodha Group", "Beach Villas", 40),
            DeveloperSeed("Shapoorji Pallonji", "Premium Villas", 150),
            DeveloperSeed("Raymond Realty", "Plotted Development", 10),
        ),
    ),
    CitySeed(
        name="Mumbai",
        country="India",
        micromarkets=("Bandra", "Andheri", "Worli", "Powai", "Juhu", "Goregaon", "Thane"),
        developers=(
            DeveloperSeed("Lodha Group", "Luxury Towers", 40),
            DeveloperSeed("Godrej Properties", "Premium Apartments", 25),
            DeveloperSeed("Oberoi Realty", "Ultra-luxury", 35),
            DeveloperSeed("Kalpataru", "Residential", 50),
        ),
    ),
)

CITY_BY_NAME: dict[str, CitySeed] = {c.name: c for c in CITY_CATALOG}

COMPLETION_STATUSES: tuple[str, ...] = ("Under Construction", "Ready to Move", "Pre-launch")


@dataclass(frozen=True)
class SeoMetadata:
    slug: str
    seo_title: str
    meta_description: str
    h1_title: str
    hero_hook: str


def seo_metadata(name: str, city: str | None = None) -> SeoMetadata:
    """Deterministic page copy for a seeded entity; `city` scopes micromarkets and developers."""
    if city:
        return SeoMetadata(
            slug=slugify(name),
            seo_title=f"{name} {city} - Premium Real Estate | RE/MAX Westside",
            meta_description=(
                f"Explore {name} in {city}. Find premium properties, investment opportunities, "
                "and detailed market insights."
            ),
            h1_title=f"{name}, {city}",
            hero_hook=f"Discover Premium Properties in {name}",
        )
    return SeoMetadata(
        slug=slugify(name),
        seo_title=f"{name} Real Estate - Properties & Investment Guide",
        meta_description=(
            f"Discover {name} real estate market. Comprehensive guide to properties, pricing, "
            "and investment opportunities."
        ),
        h1_title=name,
        hero_hook=f"Your Gateway to {name} Real Estate",
    )
