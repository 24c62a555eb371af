# listing_pipeline/domain/types.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping


# (map key prefix, name attribute, distance attribute)
LANDMARK_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("school1", "school1_name", "school1_distance"),
    ("school2", "school2_name", "school2_distance"),
    ("hospital1", "hospital1_name", "hospital1_distance"),
    ("hospital2", "hospital2_name", "hospital2_distance"),
    ("mall", "mall_name", "mall_distance"),
    ("it_hub", "it_hub_name", "it_hub_distance"),
    ("orr_exit", "orr_exit", "exit_distance"),
)


@dataclass(frozen=True)
class SourceRow:
    """One spreadsheet row. `sequence_number` is the S.No column, 1-based."""

    sequence_number: int
    city: str
    location: str
    project_name: str
    property_type: str
    configuration: str

    sqft: float | None = None
    floor: str = ""
    floor_number: str = ""
    facing: str = ""
    parkings: int | None = None
    price: float | None = None
    price_display: str = ""
    bedrooms: int | None = None
    bathrooms: int | None = None
    total_floors: str = ""
    status: str = "active"
    furnishing_status: str = ""

    school1_name: str = ""
    school1_distance: str = ""
    school2_name: str = ""
    school2_distance: str = ""
    hospital1_name: str = ""
    hospital1_distance: str = ""
    hospital2_name: str = ""
    hospital2_distance: str = ""
    mall_name: str = ""
    mall_distance: str = ""
    it_hub_name: str = ""
    it_hub_distance: str = ""
    orr_exit: str = ""
    exit_distance: str = ""

    google_maps_url: str = ""

    # Upstream SEO enrichment; None means "use the run defaults"
    amenities: tuple[str, ...] | None = None
    ownership_type: str | None = None
    possession_status: str | None = None


@dataclass(frozen=True)
class DriveFile:
    id: str
    name: str
    url: str
    thumbnail_url: str | None = None


@dataclass(frozen=True)
class MatchedImageSet:
    images: tuple[tuple[int, str], ...]
    placeholder_url: str

    @property
    def matched(self) -> bool:
        return bool(self.images)

    @property
    def main_image(self) -> str:
        for ordinal, url in self.images:
            if ordinal == 1:
                return url
        return self.placeholder_url

    @property
    def gallery(self) -> list[str]:
        return [url for ordinal, url in self.images if ordinal > 1]

    @property
    def has_main_image(self) -> bool:
        return self.main_image != self.placeholder_url


@dataclass(frozen=True)
class IngestEntity:
    sequence_number: int

    title: str
    slug: str
    seo_slug: str
    description: str
    price: int | None
    price_display: str
    property_type: str
    location: str
    micro_market: str
    project_name: str
    bhk_config: str
    bedrooms: int | None
    bathrooms: int | None
    area_sqft: float | None
    floor_number: str
    total_floors: str
    facing: str
    parking_spaces: int | None
    ownership_type: str
    possession_status: str
    furnished_status: str
    main_image_url: str
    image_gallery: tuple[str, ...]
    amenities: tuple[str, ...]
    unique_features: tuple[str, ...]
    nearby_landmarks: Mapping[str, str]  # read-only view
    google_maps_url: str
    status: str
    agent_id: str

    def to_record(self) -> dict[str, Any]:
        """Storage payload; `sequence_number` is reporting-only and not persisted."""
        out: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "sequence_number":
                continue
            v = getattr(self, f.name)
            if isinstance(v, tuple):
                v = list(v)
            elif isinstance(v, Mapping):
                v = dict(v)
            out[f.name] = v
        return out


# -----------------------------
# Run results
# -----------------------------
@dataclass(frozen=True)
class ChunkOutcome:
    index: int  # 1-based
    sequence_numbers: tuple[int, ...]
    inserted: int
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    total: int = 0
    prepared: int = 0
    inserted_count: int = 0
    errored_count: int = 0
    image_match_count: int = 0
    no_image_count: int = 0
    skipped: list[int] = field(default_factory=list)
    chunks: list[ChunkOutcome] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)
    # rows that never became an entity: (sequence number, error)
    build_errors: list[tuple[int, str]] = field(default_factory=list)
    fatal_error: str | None = None

    def record_build_failure(self, sequence_number: int, error: str) -> None:
        self.errored_count += 1
        self.build_errors.append((sequence_number, error))

    def record_chunk(self, outcome: ChunkOutcome) -> None:
        self.chunks.append(outcome)
        if outcome.ok:
            self.inserted_count += outcome.inserted
        else:
            self.errored_count += len(outcome.sequence_numbers)
            self.errors.append((outcome.index, outcome.error or ""))

    def merge_persisted(self, other: "BatchResult") -> None:
        for chunk in other.chunks:
            self.record_chunk(chunk)

    @property
    def inserted_sequence_numbers(self) -> list[int]:
        return [n for c in self.chunks if c.ok for n in c.sequence_numbers]

    @property
    def errored_sequence_numbers(self) -> list[int]:
        failed = [n for c in self.chunks if not c.ok for n in c.sequence_numbers]
        return [n for n, _ in self.build_errors] + failed

    def snapshot(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "prepared": self.prepared,
            "inserted_count": self.inserted_count,
            "errored_count": self.errored_count,
            "image_match_count": self.image_match_count,
            "no_image_count": self.no_image_count,
            "skipped": list(self.skipped),
            "inserted_sequence_numbers": self.inserted_sequence_numbers,
            "errored_sequence_numbers": self.errored_sequence_numbers,
            "chunks": [
                {
                    "index": c.index,
                    "sequence_numbers": list(c.sequence_numbers),
                    "inserted": c.inserted,
                    "error": c.error,
                }
                for c in self.chunks
            ],
            "errors": [{"chunk": i, "error": e} for i, e in self.errors],
            "build_errors": [{"sequence_number": n, "error": e} for n, e in self.build_errors],
            "fatal_error": self.fatal_error,
        }


class UpdateStatus(str, Enum):
    updated = "updated"
    not_found = "not_found"
    failed = "failed"


@dataclass(frozen=True)
class UpdateOutcome:
    sequence_number: int
    status: UpdateStatus
    error: str | None = None
    property_id: int | None = None

    @classmethod
    def updated(cls, sequence_number: int, property_id: int) -> "UpdateOutcome":
        return cls(sequence_number, UpdateStatus.updated, property_id=property_id)

    @classmethod
    def not_found(cls, sequence_number: int) -> "UpdateOutcome":
        return cls(sequence_number, UpdateStatus.not_found)

    @classmethod
    def failed(cls, sequence_number: int, error: str) -> "UpdateOutcome":
        return cls(sequence_number, UpdateStatus.failed, error=error)


@dataclass
class ReconciliationSummary:
    total: int = 0
    updated_count: int = 0
    not_found_count: int = 0
    errored_count: int = 0
    no_image_count: int = 0
    skipped: list[int] = field(default_factory=list)
    outcomes: list[UpdateOutcome] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)
    fatal_error: str | None = None

    def add(self, outcome: UpdateOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.status is UpdateStatus.updated:
            self.updated_count += 1
        elif outcome.status is UpdateStatus.not_found:
            self.not_found_count += 1
        else:
            self.errored_count += 1
            self.errors.append((outcome.sequence_number, outcome.error or ""))

    def snapshot(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "updated_count": self.updated_count,
            "not_found_count": self.not_found_count,
            "errored_count": self.errored_count,
            "no_image_count": self.no_image_count,
            "skipped": list(self.skipped),
            "outcomes": [
                {
                    "sequence_number": o.sequence_number,
                    "status": o.status.value,
                    "error": o.error,
                    "property_id": o.property_id,
                }
                for o in self.outcomes
            ],
            "errors": [{"sequence_number": n, "error": e} for n, e in self.errors],
            "fatal_error": self.fatal_error,
        }


@dataclass
class SeedResult:
    counts: dict[str, int] = field(default_factory=dict)
    errors: list[tuple[str, str]] = field(default_factory=list)

    @property
    def seeded(self) -> bool:
        return sum(self.counts.values()) > 0

    def snapshot(self) -> dict[str, Any]:
        return {
            "seeded": self.seeded,
            "counts": dict(self.counts),
            "errors": [{"phase": p, "error": e} for p, e in self.errors],
        }
