# listing_pipeline/service_layer/record_builder.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from ..config import settings
from ..domain.normalize import normalize_property_type
from ..domain.slugs import SlugRegistry, ensure_unique, slugify
from ..domain.types import LANDMARK_FIELDS, IngestEntity, MatchedImageSet, SourceRow


@dataclass(frozen=True)
class BuilderDefaults:
    """
    Run-level defaults for fields the spreadsheet doesn't carry.

    agent_id is resolved once per run (first active agent, else the configured
    fallback) before the builder is constructed.
    """

    agent_id: str
    placeholder_url: str
    amenities: tuple[str, ...]
    ownership_type: str
    possession_status: str

    @classmethod
    def from_settings(cls, *, agent_id: str | None = None) -> "BuilderDefaults":
        return cls(
            agent_id=agent_id or settings.FALLBACK_AGENT_ID,
            placeholder_url=settings.PLACEHOLDER_IMAGE_URL,
            amenities=tuple(settings.DEFAULT_AMENITIES),
            ownership_type=settings.DEFAULT_OWNERSHIP_TYPE,
            possession_status=settings.DEFAULT_POSSESSION_STATUS,
        )


def build_landmarks(row: SourceRow) -> dict[str, str]:
    """Only landmarks with a name contribute keys; the rest are omitted entirely."""
    out: dict[str, str] = {}
    for key, name_attr, distance_attr in LANDMARK_FIELDS:
        name = getattr(row, name_attr)
        if not name:
            continue
        out[f"{key}_name"] = name
        out[f"{key}_distance"] = getattr(row, distance_attr)
    return out


def listing_title(row: SourceRow) -> str:
    ptype = normalize_property_type(row.property_type)
    return f"{row.configuration} {ptype} for Sale in {row.project_name}, {row.location}"


def listing_slug(title: str, location: str, registry: SlugRegistry) -> str:
    base = slugify(title)
    loc = slugify(location)
    if loc and loc not in base:
        base = f"{base}-{loc}" if base else loc
    return ensure_unique(base, registry)


def _description(row: SourceRow, ptype: str) -> str:
    return (
        f"{row.configuration} {ptype} for sale in {row.project_name}, {row.location}. "
        f"{_num(row.sqft)} sq.ft. on Floor {row.floor_number or row.floor} facing {row.facing} "
        f"with {row.parkings if row.parkings is not None else 0} parking space(s). "
        f"Total floors: {row.total_floors}."
    )


def _num(x: float | None) -> str:
    if x is None:
        return "-"
    return str(int(x)) if float(x).is_integer() else str(x)


class RecordBuilder:
    def __init__(self, defaults: BuilderDefaults) -> None:
        self.defaults = defaults

    def build(self, row: SourceRow, images: MatchedImageSet, registry: SlugRegistry) -> IngestEntity:
        ptype = normalize_property_type(row.property_type)
        title = listing_title(row)
        slug = listing_slug(title, row.location, registry)

        return IngestEntity(
            sequence_number=row.sequence_number,
            title=title,
            slug=slug,
            seo_slug=slug,
            description=_description(row, ptype),
            price=round(row.price) if row.price is not None else None,
            price_display=row.price_display,
            property_type=ptype,
            location=row.location,
            micro_market=row.location,
            project_name=row.project_name,
            bhk_config=row.configuration,
            bedrooms=row.bedrooms,
            bathrooms=row.bathrooms,
            area_sqft=row.sqft,
            floor_number=row.floor_number or row.floor,
            total_floors=row.total_floors,
            facing=row.facing,
            parking_spaces=row.parkings,
            ownership_type=row.ownership_type or self.defaults.ownership_type,
            possession_status=row.possession_status or self.defaults.possession_status,
            furnished_status=row.furnishing_status,
            main_image_url=images.main_image,
            image_gallery=tuple(images.gallery),
            amenities=row.amenities if row.amenities else self.defaults.amenities,
            unique_features=(),
            nearby_landmarks=MappingProxyType(build_landmarks(row)),
            google_maps_url=row.google_maps_url,
            status=(row.status or "active").lower(),
            agent_id=self.defaults.agent_id,
        )
